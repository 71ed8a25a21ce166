# ---------------------------------------------------------------------------
# Unit Tests: Catalog Commands (confirmation protocol)
#
# Each destructive command is exercised twice:
#   - without confirmation: nothing changes and a ConfirmationRequired
#     result describes the target (label, ids, dependents, counts)
#   - with confirmation: the mutation runs and CommandDone is returned
#
# Errors (NotFoundError, ConflictError, ValidationError, ImportFormatError)
# must propagate unchanged and leave the catalog intact.
# ---------------------------------------------------------------------------
import pytest

from cinetech.schemas.models import CommandDone, ConfirmationRequired
from cinetech.services.commands import CatalogCommands
from cinetech.services.errors import (
    ConflictError,
    ImportFormatError,
    NotFoundError,
    ValidationError,
)
from cinetech.services.sample_data import sample_catalog


@pytest.fixture
def commands(sample_store):
    return CatalogCommands(sample_store)


def test_delete_film_asks_first(sample_store, commands):
    result = commands.delete_film(1)

    assert isinstance(result, ConfirmationRequired)
    assert result.action == "delete_film"
    assert result.target_ids == [1]
    assert result.label == "Inception"
    assert len(sample_store.films) == 5


def test_delete_film_confirmed(sample_store, commands):
    result = commands.delete_film(1, confirm=True)

    assert isinstance(result, CommandDone)
    assert result.affected == 1
    assert sample_store.find_director(1) is not None
    assert [f.id for f in sample_store.films] == [2, 3, 4, 5]


def test_delete_missing_film_fails_before_asking(commands):
    with pytest.raises(NotFoundError):
        commands.delete_film(99)


def test_bulk_delete_requires_ids(commands):
    with pytest.raises(ValidationError):
        commands.delete_films([])


def test_bulk_delete_counts_present_ids(sample_store, commands):
    pending = commands.delete_films([1, 2, 99])
    assert pending.label == "2 films"
    assert pending.target_ids == [1, 2, 99]
    assert len(sample_store.films) == 5

    done = commands.delete_films([1, 2, 99], confirm=True)
    assert done.affected == 2
    assert len(sample_store.films) == 3


def test_delete_director_reports_dependents(sample_store, commands):
    pending = commands.delete_director(1)

    assert pending.dependents == 1
    assert pending.label == "Christopher Nolan"

    with pytest.raises(ConflictError) as exc:
        commands.delete_director(1, confirm=True)
    assert exc.value.dependents == 1
    assert sample_store.find_director(1) is not None


def test_delete_director_without_films(sample_store, commands):
    sample_store.delete_film(1)

    assert commands.delete_director(1).dependents == 0
    assert commands.delete_director(1, confirm=True).affected == 1
    assert sample_store.find_director(1) is None


def test_import_snapshot_reports_counts(sample_store, commands):
    document = {"films": [], "directors": [{"id": 1, "name": "Solo"}]}

    pending = commands.import_snapshot(document)
    assert (pending.current_films, pending.current_directors) == (5, 5)
    assert (pending.incoming_films, pending.incoming_directors) == (0, 1)
    assert len(sample_store.films) == 5

    done = commands.import_snapshot(document, confirm=True)
    assert done.affected == 1
    assert sample_store.films == []
    assert sample_store.get_director(1).name == "Solo"


def test_import_snapshot_bad_shape_raises_before_asking(commands):
    with pytest.raises(ImportFormatError):
        commands.import_snapshot({"directors": []})


def test_import_snapshot_with_validation(sample_store, commands):
    document = {"films": [{"id": 1, "title": "Orphan", "directorId": 7, "year": 2000}], "directors": []}

    with pytest.raises(ValidationError):
        commands.import_snapshot(document, confirm=True, validate=True)
    assert len(sample_store.films) == 5


def test_import_snapshot_accepts_catalog(store):
    done = CatalogCommands(store).import_snapshot(sample_catalog(), confirm=True)
    assert done.affected == 10
    assert len(store.films) == 5


def test_clear(sample_store, commands):
    pending = commands.clear()
    assert pending.action == "clear"
    assert pending.current_films == 5

    done = commands.clear(confirm=True)
    assert done.affected == 10
    assert sample_store.films == []
    assert sample_store.directors == []
