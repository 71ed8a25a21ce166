# COMPONENT: FASTAPI APPLICATION ENTRY POINT
# REQUIREMENTS SATISFIED:
#   - API initialization and routing
#   - Middleware configuration (logging + CORS)
#   - Catalog error to HTTP status mapping
#   - AWS Lambda compatibility via Mangum
"""
src/cinetech/main.py

Application entry point for the CineTech catalog backend. This module
assembles the FastAPI application, wires the catalog services onto the
application state, registers middleware, mounts the API routers and
exposes the AWS Lambda handler.

Assembly order (create_app):
    1. Settings are read from the environment (.env loaded first)
    2. The storage backend is chosen and the catalog is loaded from it
    3. Sample data is seeded when the catalog is empty and seeding is on
    4. Query engine, command interface, snapshot codec and ingest service
       are attached to app.state
    5. Request logging and CORS middleware are added
    6. Routers are mounted under /api; catalog errors get HTTP mappings
    7. A global OPTIONS handler is installed for CORS preflight

Error mapping:
    ValidationError      → 422
    NotFoundError        → 404
    ConflictError        → 409 (body carries the dependents count)
    ImportFormatError    → 400
    ExternalServiceError → 502

Tests build their own app through create_app() with an in-memory store
and a stubbed OMDb transport; the module-level `app` only serves uvicorn
and Lambda.
"""
import time
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from cinetech.api.middleware.log_requests import DeepASGILogger
from cinetech.api.routers.catalog import router as catalog_router
from cinetech.api.routes_snapshot import router as snapshot_router
from cinetech.config import Settings
from cinetech.services.catalog import CatalogStore
from cinetech.services.commands import CatalogCommands
from cinetech.services.errors import (
    CatalogError,
    ConflictError,
    ExternalServiceError,
    ImportFormatError,
    NotFoundError,
    ValidationError,
)
from cinetech.services.ingest import IngestService
from cinetech.services.omdb_client import OMDbClient
from cinetech.services.query import QueryEngine
from cinetech.services.sample_data import sample_catalog
from cinetech.services.snapshot import SnapshotCodec
from cinetech.services.storage import get_storage
from cinetech.utils.logging import logger

ERROR_STATUS = (
    (ValidationError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ImportFormatError, 400),
    (ExternalServiceError, 502),
)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status = next((code for kind, code in ERROR_STATUS if isinstance(exc, kind)), 400)
    body = {"detail": str(exc)}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    if isinstance(exc, ConflictError):
        body["dependents"] = exc.dependents
    logger.warning("%s %s -> %s %s", request.method, request.url.path, status, exc)
    return JSONResponse(status_code=status, content=body)


def create_app(
    settings: Optional[Settings] = None,
    storage=None,
    omdb_client: Optional[OMDbClient] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if storage is None:
        storage = get_storage(settings)

    store = CatalogStore.load(storage)
    # Only an empty catalog is seeded; stored directors without films are kept
    if settings.seed_sample_data and store.seed(sample_catalog()):
        logger.info("Catalog was empty; seeded sample data")

    if omdb_client is None:
        omdb_client = OMDbClient(
            api_key=settings.omdb_api_key,
            base_url=settings.omdb_url,
            timeout=settings.omdb_timeout,
        )

    app = FastAPI(title="CineTech Catalog API")
    app.state.settings = settings
    app.state.started_at = time.time()
    app.state.store = store
    app.state.query = QueryEngine(store)
    app.state.commands = CatalogCommands(store)
    app.state.codec = SnapshotCodec(store)
    app.state.ingest = IngestService(store, omdb_client)

    # -------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------
    app.add_middleware(DeepASGILogger)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------
    # Routers and error mapping
    # -------------------------------------------------------------
    app.include_router(catalog_router, prefix="/api")
    app.include_router(snapshot_router)
    app.add_exception_handler(CatalogError, catalog_error_handler)

    @app.options("/{path:path}")
    async def preflight_handler(path: str):
        return Response(
            status_code=204,
            headers={
                "Access-Control-Allow-Origin": settings.frontend_origin,
                "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
                "Access-Control-Allow-Headers": "content-type,authorization",
            },
        )

    logger.info(
        "App ready: storage=%s films=%d directors=%d",
        type(storage).__name__,
        len(store.films),
        len(store.directors),
    )
    return app


app = create_app()

# Lambda entry point
handler = Mangum(app)
