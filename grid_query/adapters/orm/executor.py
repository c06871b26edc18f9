"""
Query-builder grid executor.

Applies filtering, ordering and pagination to a composable query object.
"""

import logging

from grid_query.core.errors import UnknownColumn
from grid_query.core.interfaces import IComposableQuery
from grid_query.core.models import ExecutionResult, QueryPlan

logger = logging.getLogger(__name__)


class BuilderExecutor:
    """
    Executes query plans on a composable query.

    Implements the IGridExecutor interface. The total count is taken before
    filtering and the filtered count after filtering but before pagination.
    """

    def __init__(self, query: IComposableQuery):
        """
        Initialize builder executor.

        Args:
            query: Composable query producing the unfiltered row set
        """
        self.query = query

    def execute(self, plan: QueryPlan) -> ExecutionResult:
        query = self.query

        total_count = query.count()

        if not plan.predicates.is_empty:
            query = query.where(plan.predicates)

        filtered_count = query.count()

        for directive in plan.order:
            try:
                query = query.order_by(directive.source_field, directive.direction)
            except UnknownColumn as e:
                logger.debug("Skipping sort on %s", e)

        if plan.is_paginated:
            query = query.skip(plan.page_start).take(plan.page_length)

        return ExecutionResult(
            total_count=total_count,
            filtered_count=filtered_count,
            rows=query.get(),
        )
