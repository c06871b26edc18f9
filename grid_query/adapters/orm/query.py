"""
Composable grid query over a SQLAlchemy ORM Query.
"""

from typing import Any, Iterable, List, Optional, Type

from sqlalchemy.orm import Query, selectinload

from grid_query.adapters.orm.query_translator import ORMConditionTranslator
from grid_query.core.models import PredicateSet, RelationPredicate, SortDirection


class SQLAlchemyGridQuery:
    """
    Immutable wrapper around ``sqlalchemy.orm.Query``.

    Implements the IComposableQuery interface. Each fluent call returns a new
    wrapper; the wrapped Query is never modified in place.
    """

    def __init__(self, query: Query, model: Optional[Type[Any]] = None):
        """
        Initialize the grid query.

        Args:
            query: ORM query selecting a single mapped entity
            model: Mapped class; inferred from the query when omitted
        """
        self.query = query
        self.model = model or query.column_descriptions[0]["entity"]
        self.translator = ORMConditionTranslator(self.model)

    def _derive(self, query: Query) -> "SQLAlchemyGridQuery":
        return SQLAlchemyGridQuery(query, self.model)

    def with_relations(self, relations: Iterable[str]) -> "SQLAlchemyGridQuery":
        """Eager-load the named relations so row projection issues no extra queries."""
        options = [
            selectinload(self.translator.attribute(name))
            for name in relations
        ]
        if not options:
            return self
        return self._derive(self.query.options(*options))

    def count(self) -> int:
        return self.query.order_by(None).count()

    def where(self, predicates: PredicateSet) -> "SQLAlchemyGridQuery":
        criterion = self.translator.translate_set(predicates)
        if criterion is None:
            return self
        return self._derive(self.query.filter(criterion))

    def where_has(self, relation: str, predicate: Any) -> "SQLAlchemyGridQuery":
        """Keep rows with at least one related entity matching ``predicate``."""
        criterion = self.translator.relation_exists(
            self.model, RelationPredicate(relation=relation, inner=predicate)
        )
        return self._derive(self.query.filter(criterion))

    def order_by(self, field: str, direction: SortDirection) -> "SQLAlchemyGridQuery":
        column = self.translator.attribute(field)
        return self._derive(
            self.query.order_by(column.asc() if direction == "asc" else column.desc())
        )

    def skip(self, count: int) -> "SQLAlchemyGridQuery":
        return self._derive(self.query.offset(count))

    def take(self, count: int) -> "SQLAlchemyGridQuery":
        return self._derive(self.query.limit(count))

    def get(self) -> List[Any]:
        return self.query.all()
