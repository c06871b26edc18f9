"""
Error taxonomy for grid request processing.

Recoverable errors (UnknownColumn, InvalidPagination) are caught inside the
query layer and degrade to a default. Fatal errors (QueryExecutionFailed,
MissingField, InvalidFilter) abort the request and surface as a single
``{"error": ...}`` body.
"""

from typing import Optional


class GridError(Exception):
    """Base class for all grid processing errors."""


class UnknownColumn(GridError):
    """A request references an output key absent from the column registry."""

    def __init__(self, output_key: Optional[str]):
        self.output_key = output_key
        super().__init__(f"Unknown column '{output_key}'")


class InvalidPagination(GridError):
    """Negative start or zero length in the pagination window."""

    def __init__(self, start: int, length: int):
        self.start = start
        self.length = length
        super().__init__(f"Invalid pagination window start={start} length={length}")


class QueryExecutionFailed(GridError):
    """The backing store rejected a query."""


class MissingField(GridError):
    """A result row lacks a field the column registry requires."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Row is missing required field '{field}'")


class InvalidFilter(GridError):
    """A column's custom filter returned something that is not a predicate."""

    def __init__(self, output_key: str, detail: str):
        self.output_key = output_key
        super().__init__(f"Invalid filter for column '{output_key}': {detail}")
