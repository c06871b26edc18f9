"""
SQLAlchemy-backed store executor.

Runs raw SQL text with bound parameters through a SQLAlchemy Engine or
Connection and returns plain row mappings.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union

from sqlalchemy import String, cast, create_engine, literal_column, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from grid_query.core.errors import QueryExecutionFailed

logger = logging.getLogger(__name__)


class SQLAlchemyStore:
    """
    Executes SQL statements for the raw SQL backend.

    Implements the IStoreExecutor interface. When constructed from an Engine,
    ``snapshot()`` checks out one connection and wraps the statements run
    inside it in a single transaction. When constructed from a Connection,
    the caller owns the transaction.
    """

    def __init__(self, bind: Union[Engine, Connection]):
        """
        Initialize the store.

        Args:
            bind: Engine or open Connection to execute against
        """
        self.bind = bind
        self._connection: Optional[Connection] = None

    @classmethod
    def from_url(cls, database_url: str, **engine_options: Any) -> "SQLAlchemyStore":
        return cls(create_engine(database_url, **engine_options))

    def quote(self, identifier: str) -> str:
        return self.bind.dialect.identifier_preparer.quote_identifier(identifier)

    def as_text(self, expression: str) -> str:
        """Render ``expression`` cast to the dialect's text type (CHAR on MySQL)."""
        return str(cast(literal_column(expression), String()).compile(dialect=self.bind.dialect))

    @contextmanager
    def snapshot(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return

        if isinstance(self.bind, Connection):
            self._connection = self.bind
            try:
                yield self._connection
            finally:
                self._connection = None
            return

        with self.bind.connect() as connection:
            with connection.begin():
                self._connection = connection
                try:
                    yield connection
                finally:
                    self._connection = None

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute one statement.

        Args:
            sql: SQL text with ``:name`` placeholders
            params: Bound parameter values

        Returns:
            List of row dictionaries

        Raises:
            QueryExecutionFailed: If the store rejects the statement
        """
        if self._connection is None:
            with self.snapshot():
                return self.execute(sql, params)

        try:
            result = self._connection.execute(text(sql), params or {})
            return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            detail = getattr(e, "orig", None) or e
            logger.error("SQL execution failed: %s", detail)
            raise QueryExecutionFailed(f"An SQL error occurred: {detail}") from e
