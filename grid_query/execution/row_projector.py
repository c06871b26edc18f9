"""
Row projection.

Maps raw result rows into the client output shape.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from grid_query.columns.registry import ColumnRegistry
from grid_query.core.errors import MissingField
from grid_query.core.models import INDEX_COLUMN, ColumnDescriptor

_MISSING = object()


def read_field(row: Any, field: str, default: Any = _MISSING) -> Any:
    """
    Read ``field`` from a mapping row or an attribute-style (ORM) row.

    Raises:
        MissingField: If the field is absent and no default was given
    """
    if row is None:
        value = _MISSING
    elif isinstance(row, Mapping):
        value = row.get(field, _MISSING)
    else:
        value = getattr(row, field, _MISSING)

    if value is _MISSING:
        if default is _MISSING:
            raise MissingField(field)
        return default
    return value


class RowProjector:
    """
    Formats raw rows for the grid client.

    Each output row carries ``indexColumn``, the 1-based position of the row
    in the full filtered result, followed by one entry per descriptor in
    registry order.
    """

    def __init__(self, registry: ColumnRegistry):
        self.registry = registry

    def project(self, rows: Sequence[Any], page_start: int) -> List[Dict[str, Any]]:
        """
        Project a page of rows.

        Args:
            rows: Raw rows (mappings or ORM objects)
            page_start: Offset of the first row in the filtered result

        Returns:
            List of output rows

        Raises:
            MissingField: If a row lacks a plain column's source field
        """
        return [
            self.project_row(row, page_start + 1 + position)
            for position, row in enumerate(rows)
        ]

    def project_row(self, row: Any, index: int) -> Dict[str, Any]:
        output: Dict[str, Any] = {INDEX_COLUMN: index}
        for descriptor in self.registry:
            if not descriptor.db:
                if descriptor.has_formatter:
                    output[descriptor.dt] = descriptor.formatter(None, row)
                continue
            output[descriptor.dt] = self._value(descriptor, row)
        return output

    @staticmethod
    def _value(descriptor: ColumnDescriptor, row: Any) -> Any:
        if descriptor.is_related:
            related = read_field(row, descriptor.relation, None)
            if descriptor.has_formatter:
                return descriptor.formatter(read_field(related, descriptor.db, None), related)
            # A missing relation or field renders as an empty cell.
            value = read_field(related, descriptor.db, None)
            return "" if value is None else value

        if descriptor.has_formatter:
            return descriptor.formatter(read_field(row, descriptor.db), row)
        return read_field(row, descriptor.db)
