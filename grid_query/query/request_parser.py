"""
Parse the raw grid payload into a RequestModel.

Accepts the nested JSON shape the grid client sends, and the bracket-notation
key/value pairs it uses for query strings and form bodies.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from grid_query.core.errors import InvalidPagination
from grid_query.core.models import ColumnRequest, RequestModel, SortDirective

logger = logging.getLogger(__name__)

_KEY_PART = re.compile(r"[^\[\]]+")


class SearchPayload(BaseModel):
    """Search box value, global or per column."""

    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ColumnPayload(BaseModel):
    """Per-column entry of the raw payload."""

    data: Optional[str] = None
    searchable: bool = True
    orderable: bool = True
    search: SearchPayload = Field(default_factory=SearchPayload)

    @field_validator("data", mode="before")
    @classmethod
    def stringify_data(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("searchable", "orderable", mode="before")
    @classmethod
    def parse_flag(cls, value: Any) -> bool:
        """Flags arrive as the strings "true"/"false"; anything but true is false."""
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"

    @field_validator("search", mode="before")
    @classmethod
    def default_search(cls, value: Any) -> Any:
        return {} if value is None else value


class OrderPayload(BaseModel):
    """One sort instruction of the raw payload."""

    column: int
    dir: Any = None


class GridRequestPayload(BaseModel):
    """Raw grid request as sent by the client."""

    draw: int = 0
    start: int = 0
    length: int = -1
    search: SearchPayload = Field(default_factory=SearchPayload)
    order: List[OrderPayload] = Field(default_factory=list)
    columns: List[ColumnPayload] = Field(default_factory=list)

    @field_validator("search", mode="before")
    @classmethod
    def default_search(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("order", "columns", mode="before")
    @classmethod
    def default_list(cls, value: Any) -> Any:
        return [] if value is None else value


def resolve_pagination(start: int, length: int) -> Tuple[int, int]:
    """
    Validate a pagination window.

    Args:
        start: Offset of the first row
        length: Page size, -1 for no limit

    Returns:
        ``(start, length)``; unlimited windows always start at 0, so their
        index column counts from 1 whatever start the client sent (the
        PHP DataTables helper keeps the client's start there instead)

    Raises:
        InvalidPagination: For a negative start, a zero length or a length below -1
    """
    if start < 0 or length == 0 or length < -1:
        raise InvalidPagination(start, length)
    if length == -1:
        return 0, -1
    return start, length


def parse_request(
    payload: Mapping[str, Any], max_page_length: Optional[int] = None
) -> RequestModel:
    """
    Derive a RequestModel from a raw payload.

    Args:
        payload: Nested request mapping (see ``unflatten_params`` for flat input)
        max_page_length: Optional upper bound applied to the page size

    Returns:
        Normalized RequestModel

    Raises:
        pydantic.ValidationError: If the payload is structurally invalid
    """
    raw = GridRequestPayload.model_validate(payload)

    try:
        start, length = resolve_pagination(raw.start, raw.length)
    except InvalidPagination as e:
        logger.debug("%s; serving the request unpaginated", e)
        start, length = 0, -1

    if max_page_length is not None and (length == -1 or length > max_page_length):
        length = max_page_length

    return RequestModel(
        request_token=raw.draw,
        page_start=start,
        page_length=length,
        sort_directives=[
            SortDirective(column_index=order.column, direction=order.dir)
            for order in raw.order
        ],
        global_search_term=raw.search.value,
        columns=[
            ColumnRequest(
                output_key=column.data,
                searchable=column.searchable,
                orderable=column.orderable,
                search_term=column.search.value,
            )
            for column in raw.columns
        ],
    )


def unflatten_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Turn bracket-notation keys into a nested structure.

    ``columns[0][search][value]=x`` becomes
    ``{"columns": [{"search": {"value": "x"}}]}``. Mappings whose keys are
    all digits become lists ordered by index.

    Args:
        params: Flat key/value pairs from a query string or form body

    Returns:
        Nested payload mapping
    """
    tree: Dict[str, Any] = {}
    for key, value in params.items():
        parts = _KEY_PART.findall(key)
        if not parts:
            continue
        node = tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
    return _listify(tree)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    converted = {key: _listify(value) for key, value in node.items()}
    if converted and all(key.isdigit() for key in converted):
        return [converted[key] for key in sorted(converted, key=int)]
    return converted
