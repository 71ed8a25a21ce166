# ---------------------------------------------------------------------------
# Unit Tests: OMDb Record Normalization and Import Adapter
#
# This suite validates how third-party detail records become catalog films:
#   - "N/A" markers map to the catalog defaults (placeholder poster,
#     "Unspecified" genre, 120 minutes, rating 7.0, current year)
#   - first listed genre / country, leading runtime minutes and year digits
#   - director resolution by exact name, synthesis of new directors, and
#     the unknown-director sentinel when the name is not available
#   - records without a title are rejected and leave the catalog unchanged
# ---------------------------------------------------------------------------
from datetime import datetime, timezone

import pytest

from cinetech.schemas.models import PLACEHOLDER_POSTER
from cinetech.services.errors import ValidationError
from cinetech.utils.omdb_normalize import (
    is_not_available,
    normalize_external_film,
    parse_leading_int,
    parse_rating,
)

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Pure normalization
# ---------------------------------------------------------------------------


def test_normalize_full_record(omdb_record):
    fields = normalize_external_film(omdb_record(), NOW)

    assert fields["title"] == "Tenet"
    assert fields["year"] == 2020
    assert fields["genre"] == "Action"
    assert fields["duration"] == 150
    assert fields["rating"] == 7.3
    assert fields["poster"] == "https://example.com/tenet.jpg"
    assert fields["director_name"] == "Christopher Nolan"
    assert fields["nationality"] == "United Kingdom"


def test_normalize_not_available_markers(omdb_record):
    fields = normalize_external_film(
        omdb_record(
            Year="N/A", Genre="N/A", Runtime="N/A", imdbRating="N/A",
            Poster="N/A", Plot="N/A", Director="N/A", Country="N/A",
        ),
        NOW,
    )

    assert fields["year"] == 2025
    assert fields["genre"] == "Unspecified"
    assert fields["duration"] == 120
    assert fields["rating"] == 7.0
    assert fields["poster"] == PLACEHOLDER_POSTER
    assert fields["synopsis"] == ""
    assert fields["director_name"] is None
    assert fields["nationality"] == ""


def test_year_range_uses_leading_digits(omdb_record):
    assert normalize_external_film(omdb_record(Year="2010–2014"), NOW)["year"] == 2010


@pytest.mark.parametrize("value", [None, "", "  ", "N/A", "n/a"])
def test_is_not_available(value):
    assert is_not_available(value)


def test_parse_leading_int():
    assert parse_leading_int("148 min", 120) == 148
    assert parse_leading_int("about two hours", 120) == 120


@pytest.mark.parametrize("value", ["N/A", "eleven", "11.5", "-1"])
def test_parse_rating_falls_back(value):
    assert parse_rating(value) == 7.0


# ---------------------------------------------------------------------------
# Store import
# ---------------------------------------------------------------------------


def test_unknown_director_maps_to_sentinel(store, omdb_record):
    film = store.import_external_film(omdb_record(Director="N/A", imdbRating="N/A"), NOW)

    assert film.director_id == 0
    assert film.rating == 7.0
    assert store.directors == []


def test_existing_director_is_reused(sample_store, omdb_record):
    film = sample_store.import_external_film(omdb_record(), NOW)

    assert film.director_id == 1
    assert len(sample_store.directors) == 5
    assert film.id == 6


def test_director_match_is_case_sensitive(sample_store, omdb_record):
    film = sample_store.import_external_film(omdb_record(Director="christopher nolan"), NOW)

    assert film.director_id == 6
    assert len(sample_store.directors) == 6


def test_new_director_is_synthesized(store, omdb_record):
    film = store.import_external_film(omdb_record(Director="Denis Villeneuve", Title="Dune"), NOW)
    director = store.get_director(film.director_id)

    assert director.name == "Denis Villeneuve"
    assert director.nationality == "United Kingdom"
    assert director.bio == 'Director of "Dune"'
    assert film.created_at == NOW


def test_import_commits_once(store, omdb_record, mocker):
    listener = mocker.Mock()
    store.add_listener(listener)

    store.import_external_film(omdb_record(), NOW)

    listener.assert_called_once()
    assert store.revision == 1


def test_import_respects_high_water_mark(store, omdb_record):
    store.create_film({"title": "Temp", "year": 2000, "duration": 90, "rating": 5})
    store.delete_film(1)

    assert store.import_external_film(omdb_record(), NOW).id == 2


def test_record_without_title_is_rejected(sample_store, omdb_record):
    with pytest.raises(ValidationError):
        sample_store.import_external_film(omdb_record(Title="N/A", Director="Someone New"), NOW)

    assert len(sample_store.films) == 5
    assert len(sample_store.directors) == 5
