# src/cinetech/api/routers/catalog.py

from __future__ import annotations

import time
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from cinetech.schemas.models import (
    DashboardKpis,
    Director,
    DirectorIn,
    DirectorRow,
    ExternalCandidate,
    Film,
    FilmIn,
    LabelCount,
    QuickStats,
    StorageUsage,
)
from cinetech.services.catalog import CatalogStore
from cinetech.services.commands import CatalogCommands
from cinetech.services.ingest import IngestService
from cinetech.services.query import QueryEngine
from cinetech.services.sample_data import sample_catalog
from cinetech.api.deps import get_commands, get_ingest, get_query, get_store
from cinetech.utils.logging import logger

router = APIRouter()


class BulkDeleteRequest(BaseModel):
    ids: List[int]


# ---------------------------------------------------------------------------
# /health, /reset, /sample-data
# ---------------------------------------------------------------------------


@router.get("/health")
def health(request: Request, store: CatalogStore = Depends(get_store)):
    uptime = int(time.time() - request.app.state.started_at)
    logger.info("HEALTH: uptime_s=%s films=%s", uptime, len(store.films))
    return {
        "status": "ok",
        "uptime_s": uptime,
        "films": len(store.films),
        "directors": len(store.directors),
        "revision": store.revision,
    }


@router.delete("/reset")
def reset_catalog(confirm: bool = False, commands: CatalogCommands = Depends(get_commands)):
    logger.warning("RESET requested: confirm=%s", confirm)
    return commands.clear(confirm=confirm)


@router.post("/sample-data")
def load_sample_data(confirm: bool = False, commands: CatalogCommands = Depends(get_commands)):
    return commands.import_snapshot(sample_catalog(), confirm=confirm)


# ---------------------------------------------------------------------------
# Films
# ---------------------------------------------------------------------------


@router.get("/films", response_model=List[Film])
def list_films(
    q: str = "",
    genre: str = "",
    sort: str = "title-asc",
    query: QueryEngine = Depends(get_query),
):
    results = query.search(q, genre, sort)
    logger.info("GET /films: q=%s genre=%s sort=%s count=%d", q, genre, sort, len(results))
    return results


@router.post("/films", response_model=Film, status_code=201)
def create_film(body: FilmIn, store: CatalogStore = Depends(get_store)):
    return store.create_film(body)


# Static path before /films/{film_id}
@router.post("/films/bulk-delete")
def bulk_delete_films(
    body: BulkDeleteRequest,
    confirm: bool = False,
    commands: CatalogCommands = Depends(get_commands),
):
    return commands.delete_films(body.ids, confirm=confirm)


@router.get("/films/{film_id}", response_model=Film)
def read_film(film_id: int, store: CatalogStore = Depends(get_store)):
    return store.get_film(film_id)


@router.put("/films/{film_id}", response_model=Film)
def update_film(film_id: int, body: FilmIn, store: CatalogStore = Depends(get_store)):
    return store.update_film(film_id, body)


@router.delete("/films/{film_id}")
def delete_film(film_id: int, confirm: bool = False, commands: CatalogCommands = Depends(get_commands)):
    return commands.delete_film(film_id, confirm=confirm)


# ---------------------------------------------------------------------------
# Directors
# ---------------------------------------------------------------------------


@router.get("/directors", response_model=List[DirectorRow])
def list_directors(query: QueryEngine = Depends(get_query)):
    return query.director_table()


@router.post("/directors", response_model=Director, status_code=201)
def create_director(body: DirectorIn, store: CatalogStore = Depends(get_store)):
    return store.create_director(body)


@router.get("/directors/{director_id}", response_model=DirectorRow)
def read_director(
    director_id: int,
    store: CatalogStore = Depends(get_store),
    query: QueryEngine = Depends(get_query),
):
    director = store.get_director(director_id)
    stats = query.director_stats(director_id)
    return DirectorRow(director=director, film_count=stats.count, average_rating=stats.average_rating)


@router.put("/directors/{director_id}", response_model=Director)
def update_director(director_id: int, body: DirectorIn, store: CatalogStore = Depends(get_store)):
    return store.update_director(director_id, body)


@router.delete("/directors/{director_id}")
def delete_director(
    director_id: int,
    confirm: bool = False,
    commands: CatalogCommands = Depends(get_commands),
):
    return commands.delete_director(director_id, confirm=confirm)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@router.get("/stats/dashboard", response_model=DashboardKpis)
def stats_dashboard(query: QueryEngine = Depends(get_query)):
    return query.dashboard_kpis()


@router.get("/stats/recent", response_model=List[Film])
def stats_recent(n: int = Query(5, ge=0, le=100), query: QueryEngine = Depends(get_query)):
    return query.recent_films(n)


@router.get("/stats/directors", response_model=List[LabelCount])
def stats_directors(top: int = Query(5, ge=0, le=100), query: QueryEngine = Depends(get_query)):
    return query.aggregate_by_director(top)


@router.get("/stats/years", response_model=List[LabelCount])
def stats_years(query: QueryEngine = Depends(get_query)):
    return query.aggregate_by_year()


@router.get("/stats/genres", response_model=List[LabelCount])
def stats_genres(query: QueryEngine = Depends(get_query)):
    return query.aggregate_by_genre()


@router.get("/stats/ratings", response_model=List[LabelCount])
def stats_ratings(query: QueryEngine = Depends(get_query)):
    return query.rating_histogram()


@router.get("/stats/monthly", response_model=List[int])
def stats_monthly(query: QueryEngine = Depends(get_query)):
    return query.monthly_additions()


@router.get("/stats/quick", response_model=QuickStats)
def stats_quick(query: QueryEngine = Depends(get_query)):
    return query.quick_stats()


@router.get("/stats/storage", response_model=StorageUsage)
def stats_storage(query: QueryEngine = Depends(get_query)):
    return query.storage_usage()


# ---------------------------------------------------------------------------
# External metadata (OMDb)
# ---------------------------------------------------------------------------


@router.get("/external/search", response_model=List[ExternalCandidate])
async def external_search(q: str, ingest: IngestService = Depends(get_ingest)):
    return await ingest.search(q)


@router.post("/external/import/{imdb_id}", response_model=Film, status_code=201)
async def external_import(imdb_id: str, ingest: IngestService = Depends(get_ingest)):
    return await ingest.import_by_id(imdb_id)
