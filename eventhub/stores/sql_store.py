"""SQLModel implementation of the DocumentStore."""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import inspect, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlmodel import Session, SQLModel, select

from eventhub.core.errors import StoreUnavailableError
from eventhub.stores.interfaces import DocumentStore, GuardedIncrement, ModelT

logger = logging.getLogger(__name__)


class _Conflict(Exception):
    """Internal signal that a guarded write matched no row."""


def _primary_key(model: type[SQLModel]):
    return inspect(model).primary_key[0]


class SQLModelStore(DocumentStore):
    """SQL-backed store; one short-lived session per operation."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        # expire_on_commit=False keeps returned records readable after close
        try:
            with Session(self._engine, expire_on_commit=False) as session:
                yield session
        except IntegrityError:
            raise
        except (OperationalError, DBAPIError) as e:
            logger.error(f"Store operation failed: {e}")
            raise StoreUnavailableError() from e

    def get(self, model: type[ModelT], key: Any) -> ModelT | None:
        with self._session() as session:
            return session.get(model, key)

    def create_if_absent(self, record: SQLModel) -> bool:
        with self._session() as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.debug(f"{type(record).__name__} already present, create skipped")
                return False
            return True

    def put(self, record: SQLModel) -> None:
        with self._session() as session:
            session.merge(record)
            session.commit()

    def update_fields(
        self,
        model: type[SQLModel],
        key: Any,
        values: Mapping[str, Any],
        conditions: Sequence[Any] = (),
    ) -> bool:
        statement = (
            update(model)
            .where(_primary_key(model) == key, *conditions)
            .values(dict(values))
            .execution_options(synchronize_session=False)
        )
        with self._session() as session:
            result = session.exec(statement)
            session.commit()
            return result.rowcount == 1

    def delete(self, model: type[SQLModel], key: Any) -> None:
        with self._session() as session:
            record = session.get(model, key)
            if record is None:
                return
            session.delete(record)
            session.commit()

    def query_all(self, model: type[ModelT], **equals: Any) -> list[ModelT]:
        statement = select(model)
        for name, value in equals.items():
            statement = statement.where(getattr(model, name) == value)
        with self._session() as session:
            return list(session.exec(statement).all())

    def atomically(
        self,
        guards: Sequence[GuardedIncrement],
        inserts: Sequence[SQLModel],
    ) -> bool:
        with self._session() as session:
            try:
                for guard in guards:
                    self._apply_guard(session, guard)
                for record in inserts:
                    session.add(record)
                session.commit()
            except (_Conflict, IntegrityError) as e:
                session.rollback()
                logger.info(f"Atomic write rolled back: {e!r}")
                return False
            except Exception:
                session.rollback()
                raise
            return True

    @staticmethod
    def _apply_guard(session: Session, guard: GuardedIncrement) -> None:
        model = guard.model
        column = getattr(model, guard.column)
        statement = (
            update(model)
            .where(_primary_key(model) == guard.key, *guard.conditions)
            .values({guard.column: column + guard.amount})
            .execution_options(synchronize_session=False)
        )
        result = session.exec(statement)
        if result.rowcount != 1:
            raise _Conflict(f"{model.__name__} {guard.key!r} failed guard on {guard.column}")
