"""
SQLAlchemy ORM query translator.

Converts abstract predicates into SQLAlchemy boolean expressions on a mapped
class. Relation-scoped predicates become EXISTS sub-filters.
"""

import logging
from typing import Any, List, Optional, Type

from sqlalchemy import String, and_, cast, inspect, or_
from sqlalchemy.orm import RelationshipProperty
from sqlalchemy.sql.elements import ColumnElement

from grid_query.core.errors import UnknownColumn
from grid_query.core.models import (
    DirectPredicate,
    Predicate,
    PredicateSet,
    RelationPredicate,
)

logger = logging.getLogger(__name__)

# Maps predicate operators to SQLAlchemy column methods.
OPERATOR_MAP = {
    "=": "__eq__",
    "!=": "__ne__",
    "<>": "__ne__",
    "<": "__lt__",
    "<=": "__le__",
    ">": "__gt__",
    ">=": "__ge__",
    "LIKE": "like",
    "NOT LIKE": "not_like",
    "ILIKE": "ilike",
}

# Operators that compare the column rendered as text.
TEXT_OPERATORS = {"ILIKE"}


class ORMConditionTranslator:
    """
    Translates predicates into SQLAlchemy expressions for one mapped class.

    Predicates naming attributes the model does not have are skipped.
    """

    def __init__(self, model: Type[Any]):
        """
        Initialize ORM condition translator.

        Args:
            model: SQLAlchemy mapped class the predicates apply to
        """
        self.model = model

    def translate_set(self, predicates: PredicateSet) -> Optional[ColumnElement]:
        """
        Combine a predicate set into one expression.

        Returns:
            ``(g1 OR ...) AND c1 AND ...``, or None when nothing filters
        """
        global_clauses = self._translate_all(predicates.global_group)
        column_clauses = self._translate_all(predicates.column_group)

        clauses: List[ColumnElement] = []
        if global_clauses:
            clauses.append(or_(*global_clauses))
        clauses.extend(column_clauses)

        if not clauses:
            return None
        return and_(*clauses)

    def translate(self, predicate: Predicate, model: Optional[Type[Any]] = None) -> ColumnElement:
        """
        Translate one predicate.

        Raises:
            UnknownColumn: If the predicate names a missing attribute
        """
        model = model or self.model

        if isinstance(predicate, RelationPredicate):
            return self.relation_exists(model, predicate)
        return self._compare(model, predicate)

    def relation_exists(self, model: Type[Any], predicate: RelationPredicate) -> ColumnElement:
        """EXISTS filter: at least one related row satisfies the inner predicate."""
        relationship = self.attribute(predicate.relation, model)
        prop = relationship.property
        if not isinstance(prop, RelationshipProperty):
            raise UnknownColumn(predicate.relation)

        inner = self.translate(predicate.inner, prop.mapper.class_)
        if prop.uselist:
            return relationship.any(inner)
        return relationship.has(inner)

    def attribute(self, name: str, model: Optional[Type[Any]] = None) -> Any:
        """
        Resolve a mapped attribute by name.

        Raises:
            UnknownColumn: If the class maps no such attribute
        """
        model = model or self.model
        if name not in inspect(model).all_orm_descriptors.keys():
            raise UnknownColumn(name)
        return getattr(model, name)

    def _compare(self, model: Type[Any], predicate: DirectPredicate) -> ColumnElement:
        column = self.attribute(predicate.column, model)
        if predicate.operator in TEXT_OPERATORS:
            column = cast(column, String)
        return getattr(column, OPERATOR_MAP[predicate.operator])(predicate.value)

    def _translate_all(self, predicates: List[Predicate]) -> List[ColumnElement]:
        clauses = []
        for predicate in predicates:
            try:
                clauses.append(self.translate(predicate))
            except UnknownColumn as e:
                logger.debug("Skipping filter on %s", e)
        return clauses
