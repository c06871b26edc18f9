"""
Raw SQL grid executor.

Runs the fetch, filtered-count and total-count statements over a
caller-supplied base query.
"""

from typing import Any, Dict, List, Optional

from grid_query.adapters.sql.query_translator import SQLQueryTranslator
from grid_query.columns.registry import ColumnRegistry
from grid_query.core.errors import QueryExecutionFailed
from grid_query.core.interfaces import IStoreExecutor
from grid_query.core.models import ExecutionResult, QueryPlan


class RawSQLExecutor:
    """
    Executes query plans as raw SQL.

    Implements the IGridExecutor interface. The base query is treated as an
    opaque subquery; filtering, ordering and pagination are applied around it.
    """

    def __init__(
        self,
        store: IStoreExecutor,
        base_query: str,
        registry: ColumnRegistry,
        translator: Optional[SQLQueryTranslator] = None,
    ):
        """
        Initialize raw SQL executor.

        Args:
            store: Store executor to run statements with
            base_query: SQL statement producing the unfiltered row set
            registry: Column registry, used to pick the selected fields
            translator: SQL translator; defaults to one using the store's dialect
        """
        self.store = store
        self.base_query = base_query.strip().rstrip(";")
        self.registry = registry
        self.translator = translator or SQLQueryTranslator(quote=store.quote, as_text=store.as_text)

    def execute(self, plan: QueryPlan) -> ExecutionResult:
        """
        Execute the three statements for one request, in order.

        Args:
            plan: Query plan for this request

        Returns:
            ExecutionResult with counts and the page of row mappings
        """
        fetch_sql, fetch_params = self.translator.select_statement(
            self.base_query, self.registry.selectable_fields(), plan
        )
        filtered_sql, filtered_params = self.translator.filtered_count_statement(
            self.base_query, plan.predicates
        )
        total_sql = self.translator.total_count_statement(self.base_query)

        with self.store.snapshot():
            rows = self.store.execute(fetch_sql, fetch_params)
            filtered_count = self._scalar(
                self.store.execute(filtered_sql, filtered_params), "filtered_count"
            )
            total_count = self._scalar(self.store.execute(total_sql, {}), "total_count")

        return ExecutionResult(
            total_count=total_count, filtered_count=filtered_count, rows=rows
        )

    @staticmethod
    def _scalar(rows: List[Dict[str, Any]], label: str) -> int:
        if not rows or label not in rows[0]:
            raise QueryExecutionFailed(f"Count query returned no '{label}' value")
        return int(rows[0][label])
