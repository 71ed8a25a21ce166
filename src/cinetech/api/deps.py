# COMPONENT: API DEPENDENCIES
# REQUIREMENTS SATISFIED: injection of the application-owned catalog into route handlers
"""
src/cinetech/api/deps.py

FastAPI dependencies that hand route handlers the catalog objects owned
by the application instance (see cinetech.main.create_app). Nothing here
is a module-level singleton: every app built by the factory carries its
own store.
"""
from fastapi import Request

from cinetech.services.catalog import CatalogStore
from cinetech.services.commands import CatalogCommands
from cinetech.services.ingest import IngestService
from cinetech.services.query import QueryEngine
from cinetech.services.snapshot import SnapshotCodec


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_query(request: Request) -> QueryEngine:
    return request.app.state.query


def get_commands(request: Request) -> CatalogCommands:
    return request.app.state.commands


def get_codec(request: Request) -> SnapshotCodec:
    return request.app.state.codec


def get_ingest(request: Request) -> IngestService:
    return request.app.state.ingest
