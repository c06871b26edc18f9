"""
Tests for sort directive resolution.
"""

import pytest

from grid_query import ColumnRegistry
from grid_query.core.models import ColumnRequest, OrderDirective, RequestModel, SortDirective
from grid_query.query.order_builder import OrderBuilder


@pytest.fixture
def builder():
    registry = ColumnRegistry.from_config(
        [
            {"dt": "name", "db": "full_name"},
            {"dt": "age", "db": "age"},
            {"dt": "dept", "db": "title", "relation": "department"},
        ]
    )
    return OrderBuilder(registry)


def _request(keys, directives, unorderable=()):
    return RequestModel(
        columns=[ColumnRequest(output_key=key, orderable=key not in unorderable) for key in keys],
        sort_directives=[
            SortDirective(column_index=index, direction=direction) for index, direction in directives
        ],
    )


def test_resolves_output_key_to_source_field(builder):
    order = builder.build(_request(["name", "age"], [(0, "asc"), (1, "desc")]))

    assert order == [
        OrderDirective(source_field="full_name", direction="asc"),
        OrderDirective(source_field="age", direction="desc"),
    ]


def test_anything_but_asc_is_descending(builder):
    order = builder.build(_request(["age"], [(0, "Asc"), (0, "")]))

    assert [o.direction for o in order] == ["desc", "desc"]


def test_skips_unorderable_relation_and_unknown_columns(builder):
    request = _request(
        ["name", "dept", "ghost", "age"],
        [(0, "asc"), (1, "asc"), (2, "asc"), (3, "asc"), (9, "asc")],
        unorderable=("name",),
    )

    assert builder.build(request) == [OrderDirective(source_field="age", direction="asc")]


def test_duplicate_directives_pass_through(builder):
    order = builder.build(_request(["age"], [(0, "asc"), (0, "desc")]))

    assert order == [
        OrderDirective(source_field="age", direction="asc"),
        OrderDirective(source_field="age", direction="desc"),
    ]
