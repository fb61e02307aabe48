"""Login, registration and session routes.

Login is a mock: the client is trusted to say who it is. The session
pointer is kept in a cookie.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Field, SQLModel

from eventhub.core.session_store import SessionStore
from eventhub.models import User
from eventhub.routes.deps import Services, get_services, get_session_store, require_user

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(SQLModel):
    email: str = Field(min_length=3)
    name: str | None = None


class RegisterRequest(SQLModel):
    email: str = Field(min_length=3)
    name: str = Field(min_length=1)


@router.post("/login")
async def login(
    body: LoginRequest,
    services: Services = Depends(get_services),
    session: SessionStore = Depends(get_session_store),
) -> User:
    """
    Log in as the given email.

    Unknown emails are registered on the spot, using the local part of the
    address as display name when none is given.
    """
    return await services.identity.login(session, body.email, body.name)


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    services: Services = Depends(get_services),
    session: SessionStore = Depends(get_session_store),
) -> User:
    """Create an account and log in. Returns 409 if the email is taken."""
    return await services.identity.sign_up(session, body.email, body.name)


@router.get("/me")
async def me(user: User = Depends(require_user)) -> User:
    """Return the logged-in user, or 401."""
    return user


@router.post("/logout")
async def logout(
    services: Services = Depends(get_services),
    session: SessionStore = Depends(get_session_store),
):
    """End the session."""
    await services.identity.end_session(session)
    return {"status": "logged_out"}
