# COMPONENT: OMDB METADATA CLIENT
# REQUIREMENTS SATISFIED: non-blocking film search and detail lookup against OMDb
"""
src/cinetech/services/omdb_client.py

Async wrapper around the OMDb web API.

Two endpoints are used:
    ?s=<query>  → short search hits (Title, Year, imdbID, Poster)
    ?i=<imdbID> → full detail record (Director, Genre, Runtime, Plot, ...)

All requests go through httpx.AsyncClient with a bounded timeout so that
awaiting callers yield to the event loop and the catalog remains usable
while a lookup is in flight. Timeouts, transport errors, non-200
responses and unreadable bodies are all surfaced as ExternalServiceError;
nothing in this module touches catalog state.
"""
import asyncio
from typing import Any, Dict, List, Optional

import httpx

from cinetech.config import DEFAULT_OMDB_API_KEY, DEFAULT_OMDB_URL
from cinetech.services.errors import ExternalServiceError, ValidationError
from cinetech.utils.logging import logger

SEARCH_DETAIL_LIMIT = 8


class OMDbClient:
    def __init__(
        self,
        api_key: str = DEFAULT_OMDB_API_KEY,
        base_url: str = DEFAULT_OMDB_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get(self, client: httpx.AsyncClient, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "apikey": self.api_key}
        try:
            resp = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("OMDb timeout after %ss", self.timeout)
            raise ExternalServiceError(f"OMDb request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.warning("OMDb transport error: %s", e)
            raise ExternalServiceError(f"OMDb request failed: {e}") from e

        if resp.status_code != 200:
            logger.warning("OMDb non-success: status=%s", resp.status_code)
            raise ExternalServiceError(f"OMDb answered HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError("OMDb returned a body that is not JSON") from e
        if not isinstance(data, dict):
            raise ExternalServiceError("OMDb returned an unexpected payload")
        return data

    async def _detail(self, client: httpx.AsyncClient, imdb_id: str) -> Dict[str, Any]:
        data = await self._get(client, {"i": imdb_id, "plot": "full"})
        if data.get("Response") != "True":
            raise ExternalServiceError(
                f"OMDb has no record {imdb_id}: {data.get('Error', 'unknown error')}"
            )
        return data

    # ────────────────────────────────────────────────────────────────
    # Public API
    # ────────────────────────────────────────────────────────────────
    async def search(self, query: str) -> List[Dict[str, Any]]:
        """Short search hits for a free-text query; [] when OMDb finds nothing."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query must not be empty", [{"field": "q", "message": "empty"}])

        async with self._client() as client:
            data = await self._get(client, {"s": query})

        if data.get("Response") != "True":
            logger.info("OMDb search: query=%s no results (%s)", query, data.get("Error"))
            return []
        hits = data.get("Search") or []
        logger.info("OMDb search: query=%s hits=%d", query, len(hits))
        return [h for h in hits if isinstance(h, dict) and h.get("imdbID")]

    async def detail(self, imdb_id: str) -> Dict[str, Any]:
        async with self._client() as client:
            return await self._detail(client, imdb_id)

    async def search_details(self, query: str, limit: int = SEARCH_DETAIL_LIMIT) -> List[Dict[str, Any]]:
        """Full detail records for the first `limit` search hits, fetched concurrently."""
        hits = await self.search(query)
        if not hits:
            return []
        async with self._client() as client:
            return list(
                await asyncio.gather(*(self._detail(client, h["imdbID"]) for h in hits[:limit]))
            )
