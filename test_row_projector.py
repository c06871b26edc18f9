"""
Tests for projecting raw rows into the client output shape.
"""

from types import SimpleNamespace

import pytest

from grid_query import ColumnRegistry
from grid_query.core.errors import MissingField
from grid_query.execution.row_projector import RowProjector


def _projector(columns):
    return RowProjector(ColumnRegistry.from_config(columns))


def test_index_is_relative_to_page_start():
    projector = _projector([{"dt": "name", "db": "name"}])

    rows = projector.project([{"name": "a"}, {"name": "b"}], page_start=10)

    assert rows == [{"indexColumn": 11, "name": "a"}, {"indexColumn": 12, "name": "b"}]


def test_output_follows_registry_order_and_keys():
    projector = _projector([{"dt": "years", "db": "age"}, {"dt": "who", "db": "name"}])

    row = projector.project([{"name": "Ann", "age": 25, "extra": 1}], page_start=0)[0]

    assert list(row) == ["indexColumn", "years", "who"]
    assert row == {"indexColumn": 1, "years": 25, "who": "Ann"}


def test_formatter_receives_value_and_row():
    seen = []

    def formatter(value, row):
        seen.append((value, row))
        return f"<{value}>"

    projector = _projector([{"dt": "name", "db": "name", "formatter": formatter}])
    raw = {"name": "Ann", "id": 4}

    assert projector.project([raw], 0)[0]["name"] == "<Ann>"
    assert seen == [("Ann", raw)]


def test_related_values_and_missing_relations():
    projector = _projector([{"dt": "dept", "db": "title", "relation": "department"}])

    rows = projector.project(
        [
            {"department": {"title": "Eng"}},
            {"department": None},
            {"department": {"name": "no title"}},
            {},
        ],
        page_start=0,
    )

    assert [row["dept"] for row in rows] == ["Eng", "", "", ""]


def test_related_formatter_receives_related_row():
    projector = _projector(
        [
            {
                "dt": "dept",
                "db": "title",
                "relation": "department",
                "formatter": lambda value, related: f"{value}#{related['id']}",
            }
        ]
    )

    row = projector.project([{"department": {"title": "Eng", "id": 3}}], 0)[0]

    assert row["dept"] == "Eng#3"


def test_attribute_rows_are_supported():
    projector = _projector(
        [{"dt": "name", "db": "name"}, {"dt": "dept", "db": "title", "relation": "department"}]
    )
    row = SimpleNamespace(name="Ann", department=SimpleNamespace(title="Eng"))

    assert projector.project([row], 0) == [{"indexColumn": 1, "name": "Ann", "dept": "Eng"}]


def test_missing_plain_field_is_fatal():
    projector = _projector([{"dt": "name", "db": "name"}])

    with pytest.raises(MissingField):
        projector.project([{"other": 1}], 0)


def test_sourceless_columns():
    projector = _projector(
        [
            {"dt": "name", "db": "name"},
            {"dt": "actions", "formatter": lambda value, row: f"edit/{row['name']}"},
            {"dt": "spacer"},
        ]
    )

    row = projector.project([{"name": "Ann"}], 0)[0]

    assert row == {"indexColumn": 1, "name": "Ann", "actions": "edit/Ann"}
