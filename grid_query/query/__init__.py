"""Request parsing and query translation components."""

from grid_query.query.order_builder import OrderBuilder
from grid_query.query.predicate_builder import PredicateBuilder
from grid_query.query.request_parser import parse_request, unflatten_params
from grid_query.query.translator import QueryTranslator

__all__ = [
    "OrderBuilder",
    "PredicateBuilder",
    "QueryTranslator",
    "parse_request",
    "unflatten_params",
]
