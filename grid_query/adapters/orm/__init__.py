"""SQLAlchemy ORM adapter for grid processing."""

from grid_query.adapters.orm.executor import BuilderExecutor
from grid_query.adapters.orm.query import SQLAlchemyGridQuery
from grid_query.adapters.orm.query_translator import ORMConditionTranslator

__all__ = ["BuilderExecutor", "SQLAlchemyGridQuery", "ORMConditionTranslator"]
