"""
Microblog Backend: Abstract Repository Interface
================================================

What:  Abstract base class defining the per-entity persistence contract.
How:   Concrete repositories implement the five CRUD operations and route
       every statement through `_execute` / `_flush`, which turn
       SQLAlchemy errors into PersistenceError (or DuplicateKeyError).
Who:   Subclassed by AccountRepository and MessageRepository.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.exceptions import DuplicateKeyError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


UNIQUE_VIOLATION_SQLSTATE = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """
    PostgreSQL drivers expose the SQLSTATE; sqlite3 only reports
    "UNIQUE constraint failed: <table>.<column>" in its message.
    """
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    return str(exc.orig).startswith("UNIQUE constraint failed")


class Repository(ABC, Generic[T]):
    """
    Abstract data access object for a single entity type.

    Contract:
        - get_by_id() returns None when no row matches
        - get_all() returns a (possibly empty) list
        - insert() returns the entity with its store-assigned id
        - update() / delete() return True when a row was affected
        - Every driver error is raised as PersistenceError with the
          original exception chained as __cause__
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Contract ──────────────────────────────────────────────────────────

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[T]:
        ...

    @abstractmethod
    async def get_all(self) -> Sequence[T]:
        ...

    @abstractmethod
    async def insert(self, entity: T) -> T:
        ...

    @abstractmethod
    async def update(self, entity: T) -> bool:
        ...

    @abstractmethod
    async def delete(self, entity: T) -> bool:
        ...

    # ── Statement Helpers ─────────────────────────────────────────────────

    async def _execute(self, statement: Any, error_message: str):
        """
        Execute a statement, wrapping driver failures.

        Args:
            statement: A SQLAlchemy select/update/delete construct
            error_message: Description of the operation, used as the
                PersistenceError message (e.g. "Error while deleting the
                message with id: 7")
        """
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            self._raise_persistence_error(e, str(statement), error_message)

    async def _flush(self, error_message: str) -> None:
        """Flush pending inserts so the database assigns primary keys."""
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            self._raise_persistence_error(e, None, error_message)

    def _raise_persistence_error(
        self,
        exc: SQLAlchemyError,
        sql: Optional[str],
        error_message: str,
    ) -> None:
        """Log the failure details server-side and raise the wrapped error."""
        logger.error("SQLAlchemy error: %s", exc)
        if sql:
            logger.error("SQL: %s", sql)

        context = {"error_type": type(exc).__name__}
        if sql:
            context["sql"] = sql

        if isinstance(exc, IntegrityError) and _is_unique_violation(exc):
            raise DuplicateKeyError(
                message=error_message,
                operation=type(self).__name__,
                context=context,
            ) from exc
        raise PersistenceError(
            message=error_message,
            operation=type(self).__name__,
            context=context,
        ) from exc
