"""
Abstract interfaces for grid execution backends.

These protocols define the contracts the query layer calls through: the
relational store used by the raw SQL backend, the composable query object
used by the builder backend, and the executor both backends implement.
"""

from typing import Any, ContextManager, Dict, List, Optional, Protocol

from grid_query.core.models import ExecutionResult, PredicateSet, QueryPlan, SortDirection


class IStoreExecutor(Protocol):
    """
    Execute SQL text against a relational store.

    Implementations must bind parameters rather than interpolate them and
    raise ``QueryExecutionFailed`` when the store rejects a statement.
    """

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run one statement and return its rows.

        Args:
            sql: SQL text using ``:name`` placeholders
            params: Values for the placeholders

        Returns:
            List of row mappings keyed by column label
        """
        ...

    def quote(self, identifier: str) -> str:
        """Quote an identifier for the store's SQL dialect."""
        ...

    def as_text(self, expression: str) -> str:
        """Render a SQL expression cast to the store's text type."""
        ...

    def snapshot(self) -> ContextManager[Any]:
        """
        Pin one connection and transaction for the statements run inside.

        Statements executed within the context observe a consistent view of
        the store where the store supports it.
        """
        ...


class IComposableQuery(Protocol):
    """
    Fluent query object for the builder backend.

    Every method except ``count`` and ``get`` returns a new query object;
    the receiver is left untouched.
    """

    def count(self) -> int:
        ...

    def where(self, predicates: PredicateSet) -> "IComposableQuery":
        """Apply a predicate set, interpreting relation-scoped predicates as EXISTS filters."""
        ...

    def where_has(self, relation: str, predicate: Any) -> "IComposableQuery":
        """Keep rows with at least one related entity matching ``predicate``."""
        ...

    def order_by(self, field: str, direction: SortDirection) -> "IComposableQuery":
        ...

    def skip(self, count: int) -> "IComposableQuery":
        ...

    def take(self, count: int) -> "IComposableQuery":
        ...

    def get(self) -> List[Any]:
        ...


class IGridExecutor(Protocol):
    """
    Run a query plan and return counts plus the page of raw rows.

    Both backends honour the same count semantics: total ignores filtering
    and pagination, filtered ignores pagination only.
    """

    def execute(self, plan: QueryPlan) -> ExecutionResult:
        ...
