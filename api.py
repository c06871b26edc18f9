"""
FastAPI REST API for server-side grid processing.

Exposes registered grids to a grid client over GET (query string) and POST
(JSON or form body).
"""

from typing import Any, Callable, ContextManager, Dict, Mapping, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from grid_query import GridOrchestrator
from grid_query.config import GridSettings, get_settings
from grid_query.logging_config import configure_logging
from grid_query.query.request_parser import unflatten_params

# Opens the resources a grid needs (e.g. an ORM session) for one request.
GridFactory = Callable[[], ContextManager[GridOrchestrator]]


def create_app(
    grids: Mapping[str, GridFactory], settings: Optional[GridSettings] = None
) -> FastAPI:
    """
    Build the API application.

    Args:
        grids: Grid name to a factory yielding a fresh orchestrator per request
        settings: Runtime settings; loaded from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Grid Query API",
        description="Server-side paging, sorting and search for data grids",
        version="0.1.0",
    )

    def _serve(factory: GridFactory, payload: Dict[str, Any]) -> Dict[str, Any]:
        with factory() as orchestrator:
            return orchestrator.process(payload)

    async def _process(name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        factory = grids.get(name)
        if factory is None:
            raise HTTPException(status_code=404, detail=f"Unknown grid '{name}'")
        # Fatal grid errors travel as a 200 {"error": ...} body, which is what the client expects.
        return await run_in_threadpool(_serve, factory, payload)

    @app.get("/health")
    async def health():
        """Liveness probe."""
        return {"status": "ok", "grids": sorted(grids)}

    @app.get("/grids/{name}")
    async def grid_get(name: str, request: Request):
        """Serve a grid request encoded in bracket-notation query parameters."""
        return await _process(name, unflatten_params(dict(request.query_params)))

    @app.post("/grids/{name}")
    async def grid_post(name: str, request: Request):
        """Serve a grid request sent as JSON or as a form body."""
        if request.headers.get("content-type", "").startswith("application/json"):
            payload = await request.json()
            if not isinstance(payload, dict):
                raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        else:
            form = await request.form()
            payload = unflatten_params(dict(form))
        return await _process(name, payload)

    return app


if __name__ == "__main__":
    import uvicorn

    from example_usage import build_demo_grids

    settings = get_settings()
    app = create_app(build_demo_grids(settings.database_url), settings)

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
