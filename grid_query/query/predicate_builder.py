"""
Build filter predicates from a grid request.

Produces the global (OR) and per-column (AND) predicate groups without
knowing which backend will run them.
"""

import logging
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from grid_query.columns.registry import ColumnRegistry
from grid_query.core.errors import InvalidFilter, UnknownColumn
from grid_query.core.models import (
    ColumnDescriptor,
    ColumnRequest,
    DirectPredicate,
    Predicate,
    PredicateSet,
    RelationPredicate,
    RequestModel,
)

logger = logging.getLogger(__name__)

_predicate_adapter: TypeAdapter = TypeAdapter(Predicate)


def default_predicate(source_field: str, term: str) -> DirectPredicate:
    """Case-insensitive substring match on ``source_field`` rendered as text."""
    return DirectPredicate(column=source_field, operator="ILIKE", value=f"%{term}%")


def coerce_predicate(value: Any) -> Predicate:
    """
    Accept a predicate model or a plain mapping returned by a custom filter.

    Mappings may omit ``kind``; it is inferred from the presence of
    ``relation``. ``where`` is accepted as a synonym of ``operator``.
    """
    if isinstance(value, (DirectPredicate, RelationPredicate)):
        return value
    if isinstance(value, dict) and "kind" not in value:
        value = {**value, "kind": "relationScoped" if "relation" in value else "direct"}
    return _predicate_adapter.validate_python(value)


class PredicateBuilder:
    """
    Translates search terms into backend-agnostic predicates.

    Custom ``filter`` callbacks on a descriptor replace the default substring
    match for both the global and the per-column search.
    """

    def __init__(self, registry: ColumnRegistry):
        self.registry = registry

    def build(self, request: RequestModel) -> PredicateSet:
        """
        Build both predicate groups for a request.

        Args:
            request: Normalized grid request

        Returns:
            PredicateSet with the global and per-column groups

        Raises:
            InvalidFilter: If a custom filter returns something that is not a predicate
        """
        global_group: List[Predicate] = []
        column_group: List[Predicate] = []

        if request.global_search_term != "":
            for column in request.columns:
                if not column.searchable:
                    continue
                predicate = self._predicate_for(column, request.global_search_term)
                if predicate is not None:
                    global_group.append(predicate)

        for column in request.columns:
            if not column.searchable or column.search_term == "":
                continue
            predicate = self._predicate_for(column, column.search_term)
            if predicate is not None:
                column_group.append(predicate)

        return PredicateSet(global_group=global_group, column_group=column_group)

    def _predicate_for(self, column: ColumnRequest, term: str) -> Optional[Predicate]:
        try:
            descriptor = self.registry.get(column.output_key)
        except UnknownColumn as e:
            logger.debug("Skipping search on %s", e)
            return None

        if not descriptor.db:
            return None

        return self._scoped(descriptor, self._base_predicate(descriptor, term))

    @staticmethod
    def _base_predicate(descriptor: ColumnDescriptor, term: str) -> Predicate:
        if not descriptor.has_filter:
            return default_predicate(descriptor.db, term)
        try:
            return coerce_predicate(descriptor.filter(descriptor.db, term))
        except ValidationError as e:
            raise InvalidFilter(descriptor.dt, str(e)) from e

    @staticmethod
    def _scoped(descriptor: ColumnDescriptor, predicate: Predicate) -> Predicate:
        if descriptor.is_related and isinstance(predicate, DirectPredicate):
            return RelationPredicate(relation=descriptor.relation, inner=predicate)
        return predicate
