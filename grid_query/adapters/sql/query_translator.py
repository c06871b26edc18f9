"""
Raw SQL query translator.

Converts a QueryPlan into SQL text over a caller-supplied base statement,
with every operand passed as a named bound parameter.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from grid_query.core.models import (
    DirectPredicate,
    OrderDirective,
    Predicate,
    PredicateSet,
    QueryPlan,
    RelationPredicate,
)

logger = logging.getLogger(__name__)

SUBQUERY_ALIAS = "scoped"


def ansi_quote(identifier: str) -> str:
    """Double-quote an identifier, doubling embedded quotes."""
    return '"' + identifier.replace('"', '""') + '"'


def ansi_as_text(expression: str) -> str:
    return f"CAST({expression} AS VARCHAR)"


class SQLQueryTranslator:
    """
    Builds the fetch, filtered-count and total-count statements.

    Binding keys are ``binding_0``, ``binding_1``, ... in emission order and
    unique within one statement's parameter set. Relation-scoped predicates
    have no raw SQL form and are dropped; columns from related entities must
    be joined into the base query instead.
    """

    def __init__(
        self,
        quote: Optional[Callable[[str], str]] = None,
        as_text: Optional[Callable[[str], str]] = None,
    ):
        """
        Initialize SQL query translator.

        Args:
            quote: Identifier quoting function for the target dialect
            as_text: Renders a SQL expression cast to the dialect's text type
        """
        self.quote = quote or ansi_quote
        self.as_text = as_text or ansi_as_text

    def select_statement(
        self, base_query: str, fields: List[str], plan: QueryPlan
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Build the paged, filtered and ordered fetch.

        Args:
            base_query: Caller-supplied SQL used as the row source
            fields: Source fields to select; empty selects every column
            plan: Query plan for this request

        Returns:
            ``(sql, params)``
        """
        columns = ", ".join(self.quote(field) for field in fields) if fields else "*"
        where, params = self.where_clause(plan.predicates)
        sql = (
            f"SELECT {columns} FROM ({base_query}) AS {SUBQUERY_ALIAS}"
            f"{where}{self.order_clause(plan.order)}"
            f"{self.limit_clause(plan.page_start, plan.page_length)}"
        )
        return sql, params

    def filtered_count_statement(
        self, base_query: str, predicates: PredicateSet
    ) -> Tuple[str, Dict[str, Any]]:
        where, params = self.where_clause(predicates)
        sql = (
            f"SELECT COUNT(*) AS filtered_count FROM ({base_query}) AS {SUBQUERY_ALIAS}{where}"
        )
        return sql, params

    def total_count_statement(self, base_query: str) -> str:
        return f"SELECT COUNT(*) AS total_count FROM ({base_query}) AS {SUBQUERY_ALIAS}"

    def where_clause(self, predicates: PredicateSet) -> Tuple[str, Dict[str, Any]]:
        """
        Build the WHERE clause and its parameters.

        Returns:
            ``(" WHERE ...", params)``, or ``("", {})`` when nothing filters
        """
        params: Dict[str, Any] = {}

        global_sql = [
            sql for sql in (self._predicate_sql(p, params) for p in predicates.global_group) if sql
        ]
        column_sql = [
            sql for sql in (self._predicate_sql(p, params) for p in predicates.column_group) if sql
        ]

        terms: List[str] = []
        if global_sql:
            terms.append("(" + " OR ".join(global_sql) + ")")
        terms.extend(column_sql)

        if not terms:
            return "", {}
        return " WHERE " + " AND ".join(terms), params

    def order_clause(self, order: List[OrderDirective]) -> str:
        if not order:
            return ""
        keys = ", ".join(
            f"{self.quote(directive.source_field)} {directive.direction.upper()}"
            for directive in order
        )
        return f" ORDER BY {keys}"

    @staticmethod
    def limit_clause(start: int, length: Optional[int]) -> str:
        if length is None:
            return ""
        return f" LIMIT {int(length)} OFFSET {int(start)}"

    def _predicate_sql(self, predicate: Predicate, params: Dict[str, Any]) -> Optional[str]:
        if isinstance(predicate, RelationPredicate):
            logger.warning(
                "Dropping filter on relation '%s': not supported by the raw SQL backend",
                predicate.relation,
            )
            return None
        return self._direct_sql(predicate, params)

    def _direct_sql(self, predicate: DirectPredicate, params: Dict[str, Any]) -> str:
        key = f"binding_{len(params)}"
        params[key] = predicate.value
        column = self.quote(predicate.column)
        if predicate.operator == "ILIKE":
            return f"LOWER({self.as_text(column)}) LIKE LOWER(:{key})"
        return f"{column} {predicate.operator} :{key}"
