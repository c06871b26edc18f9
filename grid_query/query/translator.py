"""
Query translation coordinator.

Combines predicate and order building into a single backend-agnostic plan.
"""

from grid_query.columns.registry import ColumnRegistry
from grid_query.core.models import QueryPlan, RequestModel
from grid_query.query.order_builder import OrderBuilder
from grid_query.query.predicate_builder import PredicateBuilder


class QueryTranslator:
    """
    Translates a grid request into a QueryPlan.

    The plan is interpreted by whichever executor backend runs it.
    """

    def __init__(self, registry: ColumnRegistry):
        """
        Initialize query translator.

        Args:
            registry: Column registry for the grid being served
        """
        self.registry = registry
        self.predicate_builder = PredicateBuilder(registry)
        self.order_builder = OrderBuilder(registry)

    def translate(self, request: RequestModel) -> QueryPlan:
        """
        Build the query plan for a request.

        Args:
            request: Normalized grid request

        Returns:
            QueryPlan with predicates, order and pagination window
        """
        return QueryPlan(
            predicates=self.predicate_builder.build(request),
            order=self.order_builder.build(request),
            page_start=request.page_start,
            page_length=request.page_length if request.is_paginated else None,
        )
