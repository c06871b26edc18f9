"""
Grid Query - server-side processing for tabular data grids.

Translates paging, sorting and search requests into safe, parameterized
queries against a relational store, through raw SQL or the SQLAlchemy ORM.
"""

from grid_query.columns.registry import ColumnRegistry
from grid_query.core.models import ColumnDescriptor, DirectPredicate, RelationPredicate
from grid_query.orchestrator import GridOrchestrator

__version__ = "0.1.0"

__all__ = [
    "ColumnDescriptor",
    "ColumnRegistry",
    "DirectPredicate",
    "GridOrchestrator",
    "RelationPredicate",
]
