"""
Grid orchestrator - main entry point.

Coordinates request parsing, query translation, execution and row projection
to answer one server-side grid request.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Query

from grid_query.columns.registry import ColumnRegistry
from grid_query.config import GridSettings, get_settings
from grid_query.core.errors import GridError
from grid_query.core.interfaces import IComposableQuery, IGridExecutor, IStoreExecutor
from grid_query.core.models import ColumnDescriptor, RequestModel, ResultEnvelope
from grid_query.execution.executor import QueryExecutor
from grid_query.execution.row_projector import RowProjector
from grid_query.query.request_parser import parse_request
from grid_query.query.translator import QueryTranslator

logger = logging.getLogger(__name__)

ColumnConfig = Iterable[Union[ColumnDescriptor, Dict[str, Any]]]


class GridOrchestrator:
    """
    Main orchestrator for server-side grid processing.

    One instance serves one grid definition; ``process`` is safe to call once
    per request and keeps no state between calls.
    """

    def __init__(
        self,
        executor: IGridExecutor,
        columns: Union[ColumnRegistry, ColumnConfig],
        settings: Optional[GridSettings] = None,
    ):
        """
        Initialize grid orchestrator with an execution backend.

        Args:
            executor: Backend executor (raw SQL or query builder)
            columns: Column registry or descriptor configs in output order
            settings: Runtime settings; loaded from the environment when omitted
        """
        self.registry = (
            columns if isinstance(columns, ColumnRegistry) else ColumnRegistry.from_config(columns)
        )
        self.settings = settings or get_settings()

        self.query_translator = QueryTranslator(self.registry)
        self.query_executor = QueryExecutor(executor)
        self.row_projector = RowProjector(self.registry)

    @classmethod
    def from_sql(
        cls,
        store: Union[IStoreExecutor, Engine, Connection],
        base_query: str,
        columns: Union[ColumnRegistry, ColumnConfig],
        settings: Optional[GridSettings] = None,
    ) -> "GridOrchestrator":
        """
        Create an orchestrator for the raw SQL backend.

        Args:
            store: Store executor, or a SQLAlchemy Engine / Connection to wrap
            base_query: SQL statement producing the unfiltered row set
            columns: Column registry or descriptor configs
            settings: Runtime settings

        Returns:
            Configured GridOrchestrator
        """
        from grid_query.adapters.sql import RawSQLExecutor, SQLAlchemyStore

        registry = (
            columns if isinstance(columns, ColumnRegistry) else ColumnRegistry.from_config(columns)
        )
        if isinstance(store, (Engine, Connection)):
            store = SQLAlchemyStore(store)

        return cls(
            executor=RawSQLExecutor(store, base_query, registry),
            columns=registry,
            settings=settings,
        )

    @classmethod
    def from_query(
        cls,
        query: Union[IComposableQuery, Query],
        columns: Union[ColumnRegistry, ColumnConfig],
        settings: Optional[GridSettings] = None,
    ) -> "GridOrchestrator":
        """
        Create an orchestrator for the query-builder backend.

        Args:
            query: Composable query, or a SQLAlchemy ORM Query to wrap
            columns: Column registry or descriptor configs
            settings: Runtime settings

        Returns:
            Configured GridOrchestrator
        """
        from grid_query.adapters.orm import BuilderExecutor, SQLAlchemyGridQuery

        registry = (
            columns if isinstance(columns, ColumnRegistry) else ColumnRegistry.from_config(columns)
        )
        if isinstance(query, Query):
            query = SQLAlchemyGridQuery(query).with_relations(registry.relations())

        return cls(executor=BuilderExecutor(query), columns=registry, settings=settings)

    def parse_request(self, payload: Mapping[str, Any]) -> RequestModel:
        return parse_request(payload, max_page_length=self.settings.max_page_length)

    def result(self, request: RequestModel) -> ResultEnvelope:
        """
        Run a parsed request end to end.

        Args:
            request: Normalized grid request

        Returns:
            ResultEnvelope for the request

        Raises:
            QueryExecutionFailed: If the store rejected a query
            MissingField: If a row lacks a configured source field
        """
        plan = self.query_translator.translate(request)
        result = self.query_executor.execute(plan)

        return ResultEnvelope(
            request_token=request.request_token,
            total_count=result.total_count,
            filtered_count=result.filtered_count,
            rows=self.row_projector.project(result.rows, request.page_start),
        )

    def process(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Answer a raw grid request.

        Args:
            payload: Raw request payload in the client's nested shape

        Returns:
            Response envelope, or ``{"error": message}`` if the request failed
        """
        try:
            request = self.parse_request(payload)
        except ValidationError as e:
            logger.warning("Rejected malformed grid request: %s", e)
            return {"error": f"Invalid request: {e}"}

        try:
            envelope = self.result(request)
        except GridError as e:
            logger.error("Grid request %d failed: %s", request.request_token, e)
            return {"error": str(e)}

        return envelope.to_response()
