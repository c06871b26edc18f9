"""Raw SQL adapter for grid processing."""

from grid_query.adapters.sql.executor import RawSQLExecutor
from grid_query.adapters.sql.query_translator import SQLQueryTranslator
from grid_query.adapters.sql.store import SQLAlchemyStore

__all__ = ["RawSQLExecutor", "SQLQueryTranslator", "SQLAlchemyStore"]
