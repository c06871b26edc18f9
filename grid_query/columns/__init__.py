"""Column descriptor registry."""

from grid_query.columns.registry import ColumnRegistry

__all__ = ["ColumnRegistry"]
