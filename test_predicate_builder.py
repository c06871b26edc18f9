"""
Tests for predicate building.
"""

import pytest

from grid_query import ColumnRegistry, DirectPredicate, RelationPredicate
from grid_query.core.errors import InvalidFilter
from grid_query.core.models import ColumnRequest, RequestModel
from grid_query.query.predicate_builder import PredicateBuilder


@pytest.fixture
def builder():
    registry = ColumnRegistry.from_config(
        [
            {"dt": "name", "db": "name"},
            {"dt": "age", "db": "age"},
            {"dt": "dept", "db": "title", "relation": "department"},
            {
                "dt": "code",
                "db": "code",
                "filter": lambda field, term: DirectPredicate(column=field, operator="=", value=term),
            },
            {
                "dt": "legacy",
                "db": "legacy_code",
                "filter": lambda field, term: {"column": field, "where": "=", "value": term.upper()},
            },
            {"dt": "actions", "db": None, "formatter": lambda value, row: "edit"},
        ]
    )
    return PredicateBuilder(registry)


def _request(keys, search="", column_search=None, unsearchable=()):
    column_search = column_search or {}
    return RequestModel(
        global_search_term=search,
        columns=[
            ColumnRequest(
                output_key=key,
                searchable=key not in unsearchable,
                search_term=column_search.get(key, ""),
            )
            for key in keys
        ],
    )


def test_no_terms_means_no_filtering(builder):
    predicates = builder.build(_request(["name", "age"]))

    assert predicates.is_empty


def test_global_search_covers_searchable_columns(builder):
    predicates = builder.build(_request(["name", "age"], search="x", unsearchable=("age",)))

    assert predicates.global_group == [DirectPredicate(column="name", operator="ILIKE", value="%x%")]
    assert predicates.column_group == []


def test_column_search_is_per_column(builder):
    predicates = builder.build(_request(["name", "age"], column_search={"name": "a", "age": "3"}))

    assert predicates.global_group == []
    assert predicates.column_group == [
        DirectPredicate(column="name", operator="ILIKE", value="%a%"),
        DirectPredicate(column="age", operator="ILIKE", value="%3%"),
    ]


def test_unsearchable_column_term_is_ignored(builder):
    predicates = builder.build(
        _request(["name"], column_search={"name": "a"}, unsearchable=("name",))
    )

    assert predicates.is_empty


def test_related_column_is_relation_scoped(builder):
    predicates = builder.build(_request(["dept"], search="eng"))

    assert predicates.global_group == [
        RelationPredicate(
            relation="department",
            inner=DirectPredicate(column="title", operator="ILIKE", value="%eng%"),
        )
    ]


def test_custom_filter_serves_global_and_column_search(builder):
    predicates = builder.build(_request(["code"], search="7", column_search={"code": "9"}))

    assert predicates.global_group == [DirectPredicate(column="code", operator="=", value="7")]
    assert predicates.column_group == [DirectPredicate(column="code", operator="=", value="9")]


def test_custom_filter_may_return_a_mapping(builder):
    predicates = builder.build(_request(["legacy"], column_search={"legacy": "ab"}))

    assert predicates.column_group == [
        DirectPredicate(column="legacy_code", operator="=", value="AB")
    ]


def test_unknown_and_sourceless_columns_are_skipped(builder):
    predicates = builder.build(
        _request(["ghost", "name", "actions"], search="x", column_search={"ghost": "y"})
    )

    assert predicates.global_group == [DirectPredicate(column="name", operator="ILIKE", value="%x%")]
    assert predicates.column_group == []


def test_filter_with_unsupported_operator_is_rejected():
    registry = ColumnRegistry.from_config(
        [
            {
                "dt": "age",
                "db": "age",
                "filter": lambda field, term: {"column": field, "where": "BETWEEN", "value": term},
            }
        ]
    )

    with pytest.raises(InvalidFilter, match="Invalid filter for column 'age'"):
        PredicateBuilder(registry).build(_request(["age"], search="1"))
