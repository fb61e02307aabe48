"""Store interfaces (repository pattern).

The document store is the only thing services talk to for persistence.
Collections are SQLModel table classes and keys are primary-key values.
Stores must be swappable and return model instances.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from sqlmodel import SQLModel

ModelT = TypeVar("ModelT", bound=SQLModel)


@dataclass(frozen=True)
class GuardedIncrement:
    """A conditional counter bump used inside an atomic write.

    The increment applies to the row of ``model`` keyed by ``key`` only when
    every condition holds at write time. A guard matching no row makes the
    whole transaction a conflict.
    """

    model: type[SQLModel]
    key: Any
    column: str
    amount: int = 1
    conditions: tuple[Any, ...] = field(default_factory=tuple)


class DocumentStore(ABC):
    """Interface for persistence operations over keyed collections."""

    @abstractmethod
    def get(self, model: type[ModelT], key: Any) -> ModelT | None:
        """Return the record stored under key, or None if absent."""
        ...

    @abstractmethod
    def create_if_absent(self, record: SQLModel) -> bool:
        """Insert record unless its key or a unique field is taken.

        Returns False, leaving the store unchanged, if it was already present.
        """
        ...

    @abstractmethod
    def put(self, record: SQLModel) -> None:
        """Unconditionally insert or replace record."""
        ...

    @abstractmethod
    def update_fields(
        self,
        model: type[SQLModel],
        key: Any,
        values: Mapping[str, Any],
        conditions: Sequence[Any] = (),
    ) -> bool:
        """Write only the given columns of the record under key.

        Columns left out of values keep whatever is stored at write time.
        Values may be SQL expressions evaluated by the store. Returns False
        if no record matched the key and conditions.
        """
        ...

    @abstractmethod
    def delete(self, model: type[SQLModel], key: Any) -> None:
        """Remove the record under key. Missing keys are ignored."""
        ...

    @abstractmethod
    def query_all(self, model: type[ModelT], **equals: Any) -> list[ModelT]:
        """Return every record of the collection matching the equality filters."""
        ...

    @abstractmethod
    def atomically(
        self,
        guards: Sequence[GuardedIncrement],
        inserts: Sequence[SQLModel],
    ) -> bool:
        """Apply guarded increments and inserts as one transaction.

        Returns True if everything committed, False on conflict (a guard
        matched nothing or an insert hit a uniqueness constraint), in which
        case nothing was written.
        """
        ...
