"""
Build sort directives from a grid request.
"""

import logging
from typing import List

from grid_query.columns.registry import ColumnRegistry
from grid_query.core.errors import UnknownColumn
from grid_query.core.models import OrderDirective, RequestModel

logger = logging.getLogger(__name__)


class OrderBuilder:
    """
    Resolves client sort directives to source fields.

    Directives on non-orderable, relation-scoped or source-less columns are
    dropped. Ordering by a related entity's field is not supported by either
    backend.
    """

    def __init__(self, registry: ColumnRegistry):
        self.registry = registry

    def build(self, request: RequestModel) -> List[OrderDirective]:
        order: List[OrderDirective] = []

        for directive in request.sort_directives:
            if not 0 <= directive.column_index < len(request.columns):
                logger.debug("Skipping sort on out-of-range column %d", directive.column_index)
                continue
            column = request.columns[directive.column_index]
            if not column.orderable:
                continue

            try:
                descriptor = self.registry.get(column.output_key)
            except UnknownColumn as e:
                logger.debug("Skipping sort on %s", e)
                continue

            if descriptor.is_related or not descriptor.db:
                logger.debug("Skipping sort on column '%s': not a base field", descriptor.dt)
                continue

            order.append(
                OrderDirective(source_field=descriptor.db, direction=directive.direction)
            )

        return order
