"""Identity service: resolves session pointers to users and creates users.

Login is a trust-the-client mock: any identifier logs in, and the first
login creates the user. One reserved identifier is granted the admin role.
User records are always persisted before the session is pointed at them.
"""

import logging

from eventhub.core.config import settings
from eventhub.core.errors import InvalidInputError, UserAlreadyExistsError
from eventhub.core.session_store import SessionStore
from eventhub.models import User, UserRole
from eventhub.stores.interfaces import DocumentStore

logger = logging.getLogger(__name__)


class IdentityService:
    """Service for user lookup, creation and session binding."""

    def __init__(self, store: DocumentStore, admin_identifier: str | None = None) -> None:
        self._store = store
        self._admin_identifier = admin_identifier or settings.admin_identifier

    def role_for(self, identifier: str) -> UserRole:
        if identifier == self._admin_identifier:
            return UserRole.ADMIN
        return UserRole.USER

    def _build_user(self, identifier: str, display_name: str | None) -> User:
        identifier = identifier.strip()
        if not identifier:
            raise InvalidInputError("An email address is required")
        name = display_name or identifier.split("@")[0]
        return User(id=identifier, email=identifier, name=name, role=self.role_for(identifier))

    async def get_user(self, identifier: str) -> User | None:
        return self._store.get(User, identifier)

    async def resolve_or_create(self, identifier: str, display_name: str | None = None) -> User:
        """Return the user for identifier, creating it on first sight.

        Creation is create-if-absent: when two calls race for a new
        identifier, the loser re-reads and returns the winner's record
        instead of overwriting it.
        """
        user = self._store.get(User, identifier.strip())
        if user is not None:
            return user

        candidate = self._build_user(identifier, display_name)
        if self._store.create_if_absent(candidate):
            logger.info(f"Created user {candidate.id} with role {candidate.role.value}")
            return candidate

        existing = self._store.get(User, candidate.id)
        if existing is None:
            # Created and removed between our two reads; treat as a fresh miss
            return await self.resolve_or_create(identifier, display_name)
        return existing

    async def register(self, identifier: str, display_name: str) -> User:
        """Create a new user, failing if the identifier is taken."""
        candidate = self._build_user(identifier, display_name)
        if not self._store.create_if_absent(candidate):
            logger.info(f"Registration refused, user {candidate.id} already exists")
            raise UserAlreadyExistsError(candidate.id)
        logger.info(f"Registered user {candidate.id} with role {candidate.role.value}")
        return candidate

    async def login(
        self, session: SessionStore, identifier: str, display_name: str | None = None
    ) -> User:
        """Resolve or create the user, then point the session at it."""
        user = await self.resolve_or_create(identifier, display_name)
        session.set(user.id)
        return user

    async def sign_up(self, session: SessionStore, identifier: str, display_name: str) -> User:
        """Register a new user, then point the session at it."""
        user = await self.register(identifier, display_name)
        session.set(user.id)
        return user

    async def current_session(self, session: SessionStore) -> User | None:
        """Return the user the session points at.

        A pointer to a user that no longer exists is cleared.
        """
        user_id = session.get()
        if not user_id:
            return None
        user = self._store.get(User, user_id)
        if user is None:
            logger.warning(f"Session pointed at missing user {user_id}, clearing")
            session.clear()
            return None
        return user

    async def end_session(self, session: SessionStore) -> None:
        session.clear()
