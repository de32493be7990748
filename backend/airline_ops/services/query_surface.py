"""Parameterized statement execution and transaction scoping over a SQLAlchemy session.

The booking core talks to storage only through :class:`QuerySurface`. Statements
are ``text()`` clauses with bound parameters; values are never spliced into SQL.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from sqlalchemy.sql.expression import TextClause
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from airline_ops.core.errors import Conflict, TransactionAborted

logger = logging.getLogger(__name__)

Params = Optional[Mapping[str, Any]]


class QuerySurface:
    def __init__(self, session: Session):
        self.session = session

    def execute(self, statement: TextClause, params: Params = None) -> int:
        """Run a write statement and return the affected row count."""
        result = self._run(statement, params)
        return result.rowcount

    def query(self, statement: TextClause, params: Params = None) -> List[Tuple[Any, ...]]:
        """Run a read (or RETURNING) statement and return its rows as tuples."""
        result = self._run(statement, params)
        return [tuple(row) for row in result.all()]

    def scalar(self, statement: TextClause, params: Params = None) -> Any:
        """First column of the first row, or None when no row matched."""
        rows = self.query(statement, params)
        return rows[0][0] if rows else None

    def _run(self, statement: TextClause, params: Params):
        try:
            return self.session.execute(statement, dict(params or {}))
        except (IntegrityError, OperationalError) as exc:
            # Unique collisions, lock timeouts and serialization failures: caller may retry
            logger.warning("Storage conflict: %s", exc.orig)
            raise Conflict(str(exc.orig)) from exc

    @contextmanager
    def transaction(self) -> Iterator["QuerySurface"]:
        """begin / commit / rollback around one atomic unit.

        Any exception inside the block rolls the whole unit back and propagates.
        A failing commit is reported as :class:`TransactionAborted`.
        """
        if self.session.in_transaction():
            if self.session.new or self.session.dirty or self.session.deleted:
                raise RuntimeError("session has uncommitted changes; commit them before a booking unit")
            # End the read-only transaction an earlier lookup left open
            self.session.rollback()
        self.session.begin()
        try:
            yield self
        except BaseException:
            self.session.rollback()
            raise
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Commit failed, transaction rolled back: %s", exc)
            raise TransactionAborted(str(exc)) from exc
