# COMPONENT: SNAPSHOT CODEC
# REQUIREMENTS SATISFIED: catalog export/import as portable JSON backups
"""
src/cinetech/services/snapshot.py

Serializes the full catalog to a portable JSON document and decodes such
documents back into a candidate catalog.

Document format (UTF-8 JSON):

    {
      "films":      [Film, ...],
      "directors":  [Director, ...],
      "exportedAt": "2024-05-01T12:00:00Z",
      "version":    "1.0"
    }

Decoding only checks the document shape: both arrays must be present and
every record must be readable as a film or director. Range checks and
referential integrity are left to validate(), which callers run when they
want full per-record validation before committing with
CatalogStore.replace_all().
"""
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from cinetech.schemas.models import (
    SNAPSHOT_VERSION,
    UNKNOWN_DIRECTOR_ID,
    Catalog,
    Director,
    Film,
    FilmIn,
)
from cinetech.services.errors import ImportFormatError, ValidationError


def _iso(ts: datetime) -> str:
    return ts.isoformat().replace("+00:00", "Z")


def decode_document(document: Any) -> Catalog:
    if not isinstance(document, dict):
        raise ImportFormatError("Snapshot must be a JSON object")

    films = document.get("films")
    directors = document.get("directors")
    if not isinstance(films, list) or not isinstance(directors, list):
        raise ImportFormatError("Snapshot must contain 'films' and 'directors' arrays")

    try:
        return Catalog(
            films=[Film.model_validate(f) for f in films],
            directors=[Director.model_validate(d) for d in directors],
        )
    except PydanticValidationError as e:
        raise ImportFormatError(
            f"Snapshot contains unreadable records ({e.error_count()} error(s))"
        ) from e


class SnapshotCodec:
    def __init__(self, store):
        self.store = store

    def export(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        return {
            "films": [f.to_json() for f in self.store.films],
            "directors": [d.model_dump(mode="json") for d in self.store.directors],
            "exportedAt": _iso(now),
            "version": SNAPSHOT_VERSION,
        }

    def dumps(self, now: Optional[datetime] = None) -> str:
        return json.dumps(self.export(now), indent=2, ensure_ascii=False)

    @staticmethod
    def export_filename(now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"cineTech-backup-{now.date().isoformat()}.json"

    @staticmethod
    def decode(document: Any) -> Catalog:
        return decode_document(document)

    @staticmethod
    def loads(text) -> Catalog:
        try:
            document = json.loads(text)
        except ValueError as e:
            raise ImportFormatError(f"Snapshot is not valid JSON: {e}") from e
        return decode_document(document)

    @staticmethod
    def validate(catalog: Catalog) -> None:
        """Full per-record validation; raises ValidationError listing every problem."""
        errors: List[Dict[str, str]] = []

        director_ids = set()
        for i, d in enumerate(catalog.directors):
            where = f"directors[{i}]"
            if d.id <= UNKNOWN_DIRECTOR_ID:
                errors.append({"field": f"{where}.id", "message": "must be a positive integer"})
            if d.id in director_ids:
                errors.append({"field": f"{where}.id", "message": f"duplicate id {d.id}"})
            director_ids.add(d.id)
            if not (d.name or "").strip():
                errors.append({"field": f"{where}.name", "message": "must not be empty"})

        film_ids = set()
        for i, f in enumerate(catalog.films):
            where = f"films[{i}]"
            if f.id <= 0:
                errors.append({"field": f"{where}.id", "message": "must be a positive integer"})
            if f.id in film_ids:
                errors.append({"field": f"{where}.id", "message": f"duplicate id {f.id}"})
            film_ids.add(f.id)
            try:
                FilmIn.model_validate(
                    f.model_dump(by_alias=True, exclude={"id", "created_at"}, exclude_none=True)
                )
            except PydanticValidationError as e:
                for err in e.errors():
                    field = ".".join(str(p) for p in err["loc"])
                    errors.append({"field": f"{where}.{field}", "message": err["msg"]})
            if f.director_id != UNKNOWN_DIRECTOR_ID and f.director_id not in director_ids:
                errors.append(
                    {"field": f"{where}.directorId", "message": f"unknown director {f.director_id}"}
                )

        if errors:
            raise ValidationError(f"Snapshot failed validation ({len(errors)} problem(s))", errors)
