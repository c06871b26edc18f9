"""
Shared data models for grid request processing.

All models are request-scoped and immutable once built.
"""

from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


SortDirection = Literal["asc", "desc"]

# ILIKE is a case-insensitive LIKE over the field rendered as text.
Operator = Literal["=", "!=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE", "ILIKE"]

INDEX_COLUMN = "indexColumn"


class ColumnDescriptor(BaseModel):
    """
    Declarative description of one output column.

    ``dt`` is the key the client sees, ``db`` the source field. When
    ``relation`` is set, ``db`` is read from the related entity instead of the
    base row. ``filter`` and ``formatter`` are optional callbacks resolved by
    presence.
    """

    model_config = ConfigDict(frozen=True)

    dt: str
    db: Optional[str] = None
    relation: Optional[str] = None
    filter: Optional[Callable[[str, str], Any]] = None
    formatter: Optional[Callable[[Any, Any], Any]] = None

    @classmethod
    def from_config(cls, config: Union["ColumnDescriptor", Dict[str, Any]]) -> "ColumnDescriptor":
        """Build a descriptor from a ``{dt, db, relation?, filter?, formatter?}`` mapping."""
        if isinstance(config, cls):
            return config
        return cls.model_validate(config)

    @property
    def has_filter(self) -> bool:
        return self.filter is not None

    @property
    def has_formatter(self) -> bool:
        return self.formatter is not None

    @property
    def is_related(self) -> bool:
        return self.relation is not None


class ColumnRequest(BaseModel):
    """Per-column metadata sent by the client."""

    model_config = ConfigDict(frozen=True)

    output_key: Optional[str] = None
    searchable: bool = True
    orderable: bool = True
    search_term: str = ""


class SortDirective(BaseModel):
    """A single client sort instruction, referencing a column by position."""

    model_config = ConfigDict(frozen=True)

    column_index: int
    direction: SortDirection = "desc"

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: Any) -> str:
        # Anything other than the exact literal "asc" sorts descending.
        return "asc" if value == "asc" else "desc"


class RequestModel(BaseModel):
    """Normalized, read-only view of a grid request."""

    model_config = ConfigDict(frozen=True)

    request_token: int = 0
    page_start: int = 0
    page_length: int = -1
    sort_directives: List[SortDirective] = Field(default_factory=list)
    global_search_term: str = ""
    columns: List[ColumnRequest] = Field(default_factory=list)

    @property
    def is_paginated(self) -> bool:
        return self.page_length != -1


class DirectPredicate(BaseModel):
    """Condition on a field of the entity being filtered."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["direct"] = "direct"
    column: str
    operator: Operator = Field(
        default="LIKE", validation_alias=AliasChoices("operator", "where")
    )
    value: Any = None

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, value: Any) -> Any:
        if isinstance(value, str):
            return " ".join(value.upper().split())
        return value


class RelationPredicate(BaseModel):
    """Condition that must hold on at least one related entity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["relationScoped"] = "relationScoped"
    relation: str
    inner: "Predicate"


Predicate = Annotated[
    Union[DirectPredicate, RelationPredicate],
    Field(discriminator="kind"),
]

RelationPredicate.model_rebuild()


class PredicateSet(BaseModel):
    """
    Filter predicates for one request.

    Combined as ``(g1 OR g2 ...) AND c1 AND c2 ...``; an empty group drops
    out of the expression entirely.
    """

    model_config = ConfigDict(frozen=True)

    global_group: List[Predicate] = Field(default_factory=list)
    column_group: List[Predicate] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.global_group and not self.column_group


class OrderDirective(BaseModel):
    """Resolved sort key."""

    model_config = ConfigDict(frozen=True)

    source_field: str
    direction: SortDirection = "asc"


class QueryPlan(BaseModel):
    """Backend-agnostic description of what an executor must run."""

    model_config = ConfigDict(frozen=True)

    predicates: PredicateSet = Field(default_factory=PredicateSet)
    order: List[OrderDirective] = Field(default_factory=list)
    page_start: int = 0
    page_length: Optional[int] = None

    @property
    def is_paginated(self) -> bool:
        return self.page_length is not None


class ExecutionResult(BaseModel):
    """Counts and raw rows produced by an executor."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    total_count: int = 0
    filtered_count: int = 0
    rows: List[Any] = Field(default_factory=list)


class ResultEnvelope(BaseModel):
    """Response for one grid request."""

    request_token: int
    total_count: int = Field(ge=0)
    filtered_count: int = Field(ge=0)
    rows: List[Dict[str, Any]] = Field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        """Serialize using the wire names the grid client expects."""
        return {
            "draw": self.request_token,
            "recordsTotal": self.total_count,
            "recordsFiltered": self.filtered_count,
            "data": self.rows,
        }
