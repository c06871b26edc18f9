"""Query execution and row projection."""

from grid_query.execution.executor import QueryExecutor
from grid_query.execution.row_projector import RowProjector

__all__ = ["QueryExecutor", "RowProjector"]
