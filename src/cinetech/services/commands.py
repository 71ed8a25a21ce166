# COMPONENT: CATALOG COMMAND INTERFACE
# REQUIREMENTS SATISFIED: two-step confirmation for destructive catalog operations
"""
src/cinetech/services/commands.py

Explicit command interface for destructive operations.

Each command is called twice by the presentation layer. The first call
(confirm=False) changes nothing and returns a ConfirmationRequired result
describing what would happen: target ids, a display label and context
counts such as the number of films that still reference a director, or
the current and incoming collection sizes of a snapshot import. The
second call (confirm=True) executes and returns CommandDone.

Errors are raised exactly as the store raises them. A NotFoundError is
reported on the first call already; a ConflictError for a referenced
director is reported when the confirmed delete is attempted.
"""
from typing import Any, Iterable, Union

from cinetech.schemas.models import Catalog, CommandDone, ConfirmationRequired
from cinetech.services.catalog import CatalogStore
from cinetech.services.errors import ValidationError
from cinetech.services.snapshot import SnapshotCodec, decode_document
from cinetech.utils.logging import logger

CommandResult = Union[ConfirmationRequired, CommandDone]


class CatalogCommands:
    def __init__(self, store: CatalogStore):
        self.store = store

    def delete_film(self, film_id: int, confirm: bool = False) -> CommandResult:
        film = self.store.get_film(film_id)
        if not confirm:
            return ConfirmationRequired(action="delete_film", target_ids=[film_id], label=film.title)
        self.store.delete_film(film_id)
        return CommandDone(action="delete_film", affected=1)

    def delete_films(self, film_ids: Iterable[int], confirm: bool = False) -> CommandResult:
        ids = list(dict.fromkeys(film_ids))
        if not ids:
            raise ValidationError("No films selected", [{"field": "ids", "message": "empty"}])
        if not confirm:
            present = {f.id for f in self.store.films}
            count = sum(1 for i in ids if i in present)
            return ConfirmationRequired(action="delete_films", target_ids=ids, label=f"{count} films")
        removed = self.store.delete_films(ids)
        return CommandDone(action="delete_films", affected=removed)

    def delete_director(self, director_id: int, confirm: bool = False) -> CommandResult:
        director = self.store.get_director(director_id)
        if not confirm:
            return ConfirmationRequired(
                action="delete_director",
                target_ids=[director_id],
                label=director.name,
                dependents=self.store.dependents_of(director_id),
            )
        self.store.delete_director(director_id)
        return CommandDone(action="delete_director", affected=1)

    def import_snapshot(self, document: Any, confirm: bool = False, validate: bool = False) -> CommandResult:
        catalog = document if isinstance(document, Catalog) else decode_document(document)
        if validate:
            SnapshotCodec.validate(catalog)

        if not confirm:
            return ConfirmationRequired(
                action="import_snapshot",
                label=(
                    f"replace {len(self.store.films)} films and {len(self.store.directors)} directors "
                    f"with {len(catalog.films)} films and {len(catalog.directors)} directors"
                ),
                current_films=len(self.store.films),
                current_directors=len(self.store.directors),
                incoming_films=len(catalog.films),
                incoming_directors=len(catalog.directors),
            )
        self.store.replace_all(catalog)
        logger.info("Snapshot imported: films=%d directors=%d", len(catalog.films), len(catalog.directors))
        return CommandDone(action="import_snapshot", affected=len(catalog.films) + len(catalog.directors))

    def clear(self, confirm: bool = False) -> CommandResult:
        films, directors = len(self.store.films), len(self.store.directors)
        if not confirm:
            return ConfirmationRequired(
                action="clear",
                label="all data",
                current_films=films,
                current_directors=directors,
            )
        self.store.clear()
        return CommandDone(action="clear", affected=films + directors)
