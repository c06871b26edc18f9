"""
Query execution coordinator.

Runs a query plan through a backend executor and normalizes store failures.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from grid_query.core.errors import QueryExecutionFailed
from grid_query.core.interfaces import IGridExecutor
from grid_query.core.models import ExecutionResult, QueryPlan

logger = logging.getLogger(__name__)


class QueryExecutor:
    """
    Coordinates query execution.

    Wraps a backend executor so that every store-level failure reaches the
    caller as ``QueryExecutionFailed``.
    """

    def __init__(self, executor: IGridExecutor):
        """
        Initialize query executor.

        Args:
            executor: Backend executor implementation
        """
        self.executor = executor

    def execute(self, plan: QueryPlan) -> ExecutionResult:
        """
        Execute a query plan.

        Args:
            plan: Query plan for this request

        Returns:
            ExecutionResult from the backend

        Raises:
            QueryExecutionFailed: If the store rejected any statement
        """
        try:
            result = self.executor.execute(plan)
        except SQLAlchemyError as e:
            detail = getattr(e, "orig", None) or e
            logger.error("Grid query failed: %s", detail)
            raise QueryExecutionFailed(f"An SQL error occurred: {detail}") from e

        if result.filtered_count > result.total_count:
            logger.error(
                "Filtered count %d exceeds total count %d; clamping",
                result.filtered_count,
                result.total_count,
            )
            result = ExecutionResult(
                total_count=result.total_count,
                filtered_count=result.total_count,
                rows=result.rows,
            )
        return result
