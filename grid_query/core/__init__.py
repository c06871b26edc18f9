"""Core interfaces, models and errors for grid processing."""

from grid_query.core.errors import (
    GridError,
    InvalidFilter,
    InvalidPagination,
    MissingField,
    QueryExecutionFailed,
    UnknownColumn,
)
from grid_query.core.interfaces import (
    IComposableQuery,
    IGridExecutor,
    IStoreExecutor,
)
from grid_query.core.models import (
    INDEX_COLUMN,
    ColumnDescriptor,
    ColumnRequest,
    DirectPredicate,
    ExecutionResult,
    OrderDirective,
    Predicate,
    PredicateSet,
    QueryPlan,
    RelationPredicate,
    RequestModel,
    ResultEnvelope,
    SortDirective,
)

__all__ = [
    "GridError",
    "InvalidFilter",
    "InvalidPagination",
    "MissingField",
    "QueryExecutionFailed",
    "UnknownColumn",
    "IComposableQuery",
    "IGridExecutor",
    "IStoreExecutor",
    "INDEX_COLUMN",
    "ColumnDescriptor",
    "ColumnRequest",
    "DirectPredicate",
    "ExecutionResult",
    "OrderDirective",
    "Predicate",
    "PredicateSet",
    "QueryPlan",
    "RelationPredicate",
    "RequestModel",
    "ResultEnvelope",
    "SortDirective",
]
