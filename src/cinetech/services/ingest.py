# COMPONENT: EXTERNAL FILM INGESTION SERVICE
# REQUIREMENTS SATISFIED: OMDb search previews and one-click import into the catalog
"""
src/cinetech/services/ingest.py

Defines the ingestion service responsible for bringing films from the
OMDb metadata service into the local catalog.

The service coordinates the two halves of an import: the network half
(OMDbClient, awaited) and the commit half (CatalogStore, synchronous).
A record is only handed to the store after it has been fetched
completely, so an ExternalServiceError at any point leaves the catalog
exactly as it was.

Key responsibilities:
    - Produce display-ready previews for search results
    - Fetch a full record by IMDb id and commit it through the import adapter
"""
from __future__ import annotations

from typing import Any, Dict, List

from cinetech.schemas.models import PLACEHOLDER_POSTER, ExternalCandidate, Film
from cinetech.services.catalog import CatalogStore
from cinetech.services.omdb_client import OMDbClient
from cinetech.utils.logging import logger
from cinetech.utils.omdb_normalize import available, is_not_available

SYNOPSIS_PREVIEW_CHARS = 200


def _preview(raw: Dict[str, Any]) -> ExternalCandidate:
    plot = raw.get("Plot")
    if is_not_available(plot):
        synopsis = "No synopsis available."
    else:
        synopsis = str(plot)[:SYNOPSIS_PREVIEW_CHARS] + "..."

    return ExternalCandidate(
        imdb_id=str(raw.get("imdbID", "")),
        title=available(raw.get("Title"), "Untitled"),
        year=available(raw.get("Year"), "N/A"),
        director=available(raw.get("Director"), "Unknown"),
        genre=available(raw.get("Genre"), "Unspecified"),
        runtime=available(raw.get("Runtime"), "Unspecified"),
        rating=available(raw.get("imdbRating"), "N/A"),
        language=available(raw.get("Language"), "N/A"),
        country=available(raw.get("Country"), "N/A"),
        poster=available(raw.get("Poster"), PLACEHOLDER_POSTER),
        synopsis=synopsis,
    )


class IngestService:
    def __init__(self, store: CatalogStore, client: OMDbClient):
        self._store = store
        self._client = client

    async def search(self, query: str) -> List[ExternalCandidate]:
        details = await self._client.search_details(query)
        logger.info("External search: query=%s candidates=%d", query, len(details))
        return [_preview(d) for d in details]

    async def import_by_id(self, imdb_id: str) -> Film:
        logger.info("INGEST start: imdb_id=%s", imdb_id)
        raw = await self._client.detail(imdb_id)

        # No awaits past this point: the commit is one synchronous step
        film = self._store.import_external_film(raw)
        logger.info("INGEST complete: imdb_id=%s film_id=%s", imdb_id, film.id)
        return film
