# COMPONENT: CATALOG STORE
# REQUIREMENTS SATISFIED: film/director persistence, referential integrity, external import
"""
src/cinetech/services/catalog.py

Defines the catalog store: the single owner of the films and directors
collections.

Every mutation goes through this class. It validates input at one
boundary (FilmIn / DirectorIn), allocates identifiers, enforces
referential integrity between films and directors, and persists both
collections through a key-value storage sink after each successful
change.

Key responsibilities:
    - Create, update and delete films and directors
    - Bulk-delete films in a single observable step
    - Reject director deletion while films still reference it
    - Normalize and commit films imported from the external metadata service
    - Replace or clear the whole catalog (snapshot restore, reset)
    - Recover from unreadable storage content by starting empty

Identifiers never repeat: each collection keeps a high-water mark that is
persisted alongside the data, so deleting the newest record does not free
its id. Id 0 is reserved for the "unknown director" sentinel.

The store is synchronous and guarded by a reentrant lock, so mutations
issued from the request threadpool and from the event loop never
interleave. Callers that await network I/O (see
services/ingest.py) only hand fully normalized records to it, so no
method ever observes or exposes a half-applied change.
"""
import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cinetech.schemas.models import (
    UNKNOWN_DIRECTOR_ID,
    Catalog,
    Director,
    DirectorIn,
    Film,
    FilmIn,
)
from cinetech.services.errors import ConflictError, NotFoundError, ValidationError
from cinetech.services.snapshot import decode_document
from cinetech.services.storage import MemoryStorage
from cinetech.utils.ids import next_id
from cinetech.utils.logging import logger
from cinetech.utils.omdb_normalize import normalize_external_film

FILMS_KEY = "cineTechFilms"
DIRECTORS_KEY = "cineTechDirectors"
COUNTERS_KEY = "cineTechCounters"

M = TypeVar("M", bound=BaseModel)


def _parse(model: Type[M], data: Any) -> M:
    """Validate a payload against an input schema, translating pydantic errors."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(f"Invalid {model.__name__} payload", errors) from e


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogStore:
    def __init__(
        self,
        storage=None,
        films: Optional[Iterable[Film]] = None,
        directors: Optional[Iterable[Director]] = None,
    ):
        self.storage = storage if storage is not None else MemoryStorage()

        self._films: List[Film] = list(films or [])
        self._directors: List[Director] = list(directors or [])
        self._film_hwm: int = next_id(self._films) - 1
        self._director_hwm: int = next_id(self._directors) - 1

        self._listeners: List[Callable[[], None]] = []
        self.revision: int = 0
        # Held across allocate, mutate and persist; reentrant for seed()
        self._lock = threading.RLock()

    @classmethod
    def load(cls, storage) -> "CatalogStore":
        store = cls(storage)
        store._load()
        return store

    # -----------------------------
    # Internal storage helpers
    # -----------------------------
    def _load_text(self, key: str) -> Optional[str]:
        try:
            return self.storage.load(key)
        except Exception as e:
            # Backend outage: start empty rather than refuse to boot
            logger.warning("Failed to read %s from storage: %s", key, e)
            return None

    def _load_collection(self, key: str, model: Type[M]) -> List[M]:
        raw = self._load_text(key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [model.model_validate(item) for item in data]
        except (ValueError, PydanticValidationError) as e:
            logger.warning("Malformed %s in storage, treating as empty: %s", key, e)
            return []

    def _load_counters(self) -> Dict[str, int]:
        raw = self._load_text(COUNTERS_KEY)
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
            return {
                "films": int(data.get("films", 0)),
                "directors": int(data.get("directors", 0)),
            }
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Malformed %s in storage, ignoring: %s", COUNTERS_KEY, e)
            return {}

    def _load(self) -> None:
        self._films = self._load_collection(FILMS_KEY, Film)
        self._directors = self._load_collection(DIRECTORS_KEY, Director)
        counters = self._load_counters()
        self._film_hwm = next_id(self._films, counters.get("films", 0)) - 1
        self._director_hwm = next_id(self._directors, counters.get("directors", 0)) - 1
        logger.info(
            "Catalog loaded: films=%d directors=%d", len(self._films), len(self._directors)
        )

    def _save(self) -> None:
        try:
            self.storage.save(FILMS_KEY, json.dumps([f.to_json() for f in self._films]))
            self.storage.save(
                DIRECTORS_KEY,
                json.dumps([d.model_dump(mode="json") for d in self._directors]),
            )
            self.storage.save(
                COUNTERS_KEY,
                json.dumps({"films": self._film_hwm, "directors": self._director_hwm}),
            )
        except Exception as e:
            # In-memory state stays authoritative; the next commit retries
            logger.error("Failed to persist catalog: %s", e)

    def _commit(self) -> None:
        self.revision += 1
        self._save()
        for listener in list(self._listeners):
            listener()

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every successful mutation."""
        self._listeners.append(callback)

    # -----------------------------
    # Identity helpers
    # -----------------------------
    def _allocate_film_id(self) -> int:
        self._film_hwm = next_id(self._films, self._film_hwm)
        return self._film_hwm

    def _allocate_director_id(self) -> int:
        self._director_hwm = next_id(self._directors, self._director_hwm)
        return self._director_hwm

    def _film_index(self, film_id: int) -> int:
        for i, f in enumerate(self._films):
            if f.id == film_id:
                return i
        raise NotFoundError("film", film_id)

    def _director_index(self, director_id: int) -> int:
        if director_id == UNKNOWN_DIRECTOR_ID:
            raise NotFoundError("director", director_id)
        for i, d in enumerate(self._directors):
            if d.id == director_id:
                return i
        raise NotFoundError("director", director_id)

    def _check_director_ref(self, director_id: int) -> None:
        if director_id == UNKNOWN_DIRECTOR_ID:
            return
        if self.find_director(director_id) is None:
            raise ValidationError(
                f"directorId {director_id} does not reference an existing director",
                [{"field": "directorId", "message": "unknown director"}],
            )

    # -----------------------------
    # Readers
    # -----------------------------
    @property
    def films(self) -> List[Film]:
        return list(self._films)

    @property
    def directors(self) -> List[Director]:
        return list(self._directors)

    def get_film(self, film_id: int) -> Film:
        return self._films[self._film_index(film_id)]

    def get_director(self, director_id: int) -> Director:
        return self._directors[self._director_index(director_id)]

    def find_director(self, director_id: int) -> Optional[Director]:
        for d in self._directors:
            if d.id == director_id:
                return d
        return None

    def find_director_by_name(self, name: str) -> Optional[Director]:
        """Exact, case-sensitive name match."""
        for d in self._directors:
            if d.name == name:
                return d
        return None

    def films_for_director(self, director_id: int) -> List[Film]:
        return [f for f in self._films if f.director_id == director_id]

    def dependents_of(self, director_id: int) -> int:
        return sum(1 for f in self._films if f.director_id == director_id)

    def snapshot(self) -> Catalog:
        return Catalog(films=list(self._films), directors=list(self._directors))

    # -----------------------------
    # Films
    # -----------------------------
    def create_film(self, data) -> Film:
        payload = _parse(FilmIn, data)
        with self._lock:
            self._check_director_ref(payload.director_id)
            film = Film(id=self._allocate_film_id(), created_at=_now(), **payload.model_dump())
            self._films.append(film)
            self._commit()
        logger.info("Film created: id=%s title=%s", film.id, film.title)
        return film

    def update_film(self, film_id: int, data) -> Film:
        with self._lock:
            idx = self._film_index(film_id)
            payload = _parse(FilmIn, data)
            self._check_director_ref(payload.director_id)

            existing = self._films[idx]
            film = Film(id=existing.id, created_at=existing.created_at, **payload.model_dump())
            self._films[idx] = film
            self._commit()
        logger.info("Film updated: id=%s title=%s", film.id, film.title)
        return film

    def delete_film(self, film_id: int) -> Film:
        with self._lock:
            removed = self._films.pop(self._film_index(film_id))
            self._commit()
        logger.info("Film deleted: id=%s title=%s", removed.id, removed.title)
        return removed

    def delete_films(self, film_ids: Iterable[int]) -> int:
        wanted = set(film_ids)
        with self._lock:
            before = len(self._films)
            self._films = [f for f in self._films if f.id not in wanted]
            removed = before - len(self._films)
            if removed:
                self._commit()
        logger.info("Bulk delete: requested=%d removed=%d", len(wanted), removed)
        return removed

    # -----------------------------
    # Directors
    # -----------------------------
    def create_director(self, data) -> Director:
        payload = _parse(DirectorIn, data)
        with self._lock:
            director = Director(id=self._allocate_director_id(), **payload.model_dump())
            self._directors.append(director)
            self._commit()
        logger.info("Director created: id=%s name=%s", director.id, director.name)
        return director

    def update_director(self, director_id: int, data) -> Director:
        with self._lock:
            idx = self._director_index(director_id)
            payload = _parse(DirectorIn, data)
            director = Director(id=director_id, **payload.model_dump())
            self._directors[idx] = director
            self._commit()
        logger.info("Director updated: id=%s name=%s", director.id, director.name)
        return director

    def delete_director(self, director_id: int) -> Director:
        with self._lock:
            idx = self._director_index(director_id)
            director = self._directors[idx]

            dependents = self.dependents_of(director_id)
            if dependents:
                logger.warning(
                    "Director delete blocked: id=%s dependents=%d", director_id, dependents
                )
                raise ConflictError(
                    f'Cannot delete "{director.name}": {dependents} film(s) still reference it',
                    dependents,
                )

            self._directors.pop(idx)
            self._commit()
        logger.info("Director deleted: id=%s name=%s", director.id, director.name)
        return director

    # -----------------------------
    # External import
    # -----------------------------
    def import_external_film(self, raw: Dict[str, Any], now: Optional[datetime] = None) -> Film:
        """
        Normalize an OMDb detail record and commit it, creating its director
        when no director with the exact same name exists yet.
        """
        now = now or _now()
        fields = normalize_external_film(raw, now)
        if not fields["title"]:
            raise ValidationError(
                "External record has no title",
                [{"field": "Title", "message": "not available"}],
            )

        # Name lookup, id allocation and commit form one critical section
        with self._lock:
            name = fields["director_name"]
            new_director = None
            if name is None:
                director_id = UNKNOWN_DIRECTOR_ID
            else:
                existing = self.find_director_by_name(name)
                if existing is not None:
                    director_id = existing.id
                else:
                    new_director = Director(
                        id=next_id(self._directors, self._director_hwm),
                        name=name,
                        nationality=fields["nationality"],
                        birthdate="",
                        bio=f'Director of "{fields["title"]}"',
                    )
                    director_id = new_director.id

            film = Film(
                id=next_id(self._films, self._film_hwm),
                title=fields["title"],
                director_id=director_id,
                year=fields["year"],
                genre=fields["genre"],
                duration=fields["duration"],
                rating=fields["rating"],
                poster=fields["poster"],
                synopsis=fields["synopsis"],
                created_at=now,
            )

            if new_director is not None:
                self._directors.append(new_director)
                self._director_hwm = new_director.id
            self._films.append(film)
            self._film_hwm = film.id
            self._commit()

        logger.info(
            "External film imported: id=%s title=%s director_id=%s new_director=%s",
            film.id,
            film.title,
            director_id,
            new_director is not None,
        )
        return film

    # -----------------------------
    # Whole-catalog operations
    # -----------------------------
    def replace_all(self, snapshot) -> None:
        """
        Swap both collections for the snapshot's contents. The shape is
        checked before anything changes; a rejected snapshot raises
        ImportFormatError and leaves the catalog untouched.
        """
        catalog = snapshot if isinstance(snapshot, Catalog) else decode_document(snapshot)

        films = list(catalog.films)
        directors = list(catalog.directors)

        with self._lock:
            self._films = films
            self._directors = directors
            self._film_hwm = next_id(films) - 1
            self._director_hwm = next_id(directors) - 1
            self._commit()
        logger.info("Catalog replaced: films=%d directors=%d", len(films), len(directors))

    def seed(self, catalog: Catalog) -> bool:
        """Load `catalog` only when both collections are empty; returns whether it did."""
        with self._lock:
            if self._films or self._directors:
                return False
            self.replace_all(catalog)
        return True

    def clear(self) -> None:
        with self._lock:
            self._films = []
            self._directors = []
            self._film_hwm = 0
            self._director_hwm = 0
            self._commit()
        logger.warning("Catalog cleared")
