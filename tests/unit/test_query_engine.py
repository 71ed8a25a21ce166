# ---------------------------------------------------------------------------
# Unit Tests: Query Engine
#
# Validates the read-only views computed over the catalog:
#   - search: substring matching over title, director name, year and genre,
#     exact genre filter, the six sort keys and locale-style title order
#   - recent films, per-director statistics and the director table
#   - chart series (director, year, genre, rating histogram, monthly)
#   - dashboard KPIs, quick statistics and storage usage
#
# Every test builds its own catalog; results must always reflect the
# latest committed mutation.
# ---------------------------------------------------------------------------
from datetime import datetime, timezone

import pytest

from cinetech.schemas.models import Film
from cinetech.services.catalog import CatalogStore
from cinetech.services.query import STORAGE_QUOTA_BYTES, QueryEngine, collation_key


def add_film(store, title, rating=5.0, **extra):
    payload = {"title": title, "year": 2000, "duration": 100, "rating": rating}
    payload.update(extra)
    return store.create_film(payload)


@pytest.fixture
def query(sample_store):
    return QueryEngine(sample_store)


def titles(films):
    return [f.title for f in films]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def test_title_sort_ignores_case(store):
    for title in ("Beta", "alpha", "Gamma"):
        add_film(store, title)
    query = QueryEngine(store)

    assert titles(query.search("", "", "title-asc")) == ["alpha", "Beta", "Gamma"]
    assert titles(query.search("", "", "title-desc")) == ["Gamma", "Beta", "alpha"]


def test_title_sort_ignores_accents(store):
    for title in ("Zulu", "Éclair", "apple", "eclair"):
        add_film(store, title)

    result = titles(QueryEngine(store).search(sort_key="title-asc"))
    assert result == ["apple", "eclair", "Éclair", "Zulu"]


def test_collation_puts_lowercase_first_on_ties():
    assert sorted(["ABC", "abc"], key=collation_key) == ["abc", "ABC"]


def test_search_by_title_fragment(query):
    assert titles(query.search("incep", "", "title-asc")) == ["Inception"]


def test_search_by_director_name(query):
    assert titles(query.search("NOLAN")) == ["Inception"]


def test_search_by_year(query):
    assert titles(query.search("1994")) == ["Pulp Fiction"]


def test_search_with_genre_filter(query):
    assert titles(query.search("", "Thriller", "title-asc")) == ["Pulp Fiction", "The Departed"]


def test_genre_filter_is_exact(query):
    assert query.search("", "thriller") == []


def test_sort_by_rating_and_year(query):
    assert titles(query.search(sort_key="rating-desc")) == [
        "Pulp Fiction",
        "Inception",
        "The Departed",
        "Jurassic Park",
        "Avatar",
    ]
    assert [f.year for f in query.search(sort_key="year-asc")] == [1993, 1994, 2006, 2009, 2010]


def test_unknown_sort_key_keeps_collection_order(query):
    assert [f.id for f in query.search(sort_key="popularity")] == [1, 2, 3, 4, 5]


def test_search_reflects_latest_mutation(sample_store, query):
    sample_store.delete_film(1)
    assert query.search("incep") == []


# ---------------------------------------------------------------------------
# Recent films and directors
# ---------------------------------------------------------------------------


def test_recent_films_newest_first(query):
    assert titles(query.recent_films(2)) == ["Avatar", "The Departed"]


def test_recent_films_puts_new_film_first(sample_store, query):
    add_film(sample_store, "Oppenheimer", directorId=1)
    assert titles(query.recent_films(1)) == ["Oppenheimer"]


def test_recent_films_missing_timestamp_is_oldest():
    store = CatalogStore(
        films=[
            Film(id=1, title="Undated", year=1950),
            Film(id=2, title="Dated", year=1960, created_at=datetime(2020, 1, 1, tzinfo=timezone.utc)),
        ]
    )
    assert titles(QueryEngine(store).recent_films()) == ["Dated", "Undated"]


def test_director_stats(sample_store, query):
    add_film(sample_store, "Tenet", rating=7.4, directorId=1)

    stats = query.director_stats(1)
    assert stats.count == 2
    assert stats.average_rating == 8.1


def test_director_stats_without_films(store):
    director = store.create_director({"name": "Newcomer"})
    stats = QueryEngine(store).director_stats(director.id)
    assert stats.count == 0
    assert stats.average_rating is None


def test_director_table(query):
    rows = query.director_table()
    assert [r.director.name for r in rows][:2] == ["Christopher Nolan", "Quentin Tarantino"]
    assert all(r.film_count == 1 for r in rows)


# ---------------------------------------------------------------------------
# Chart series
# ---------------------------------------------------------------------------


def test_aggregate_by_director_orders_by_count(sample_store, query):
    add_film(sample_store, "Kill Bill", directorId=2)

    result = query.aggregate_by_director(3)
    assert [(r.label, r.count) for r in result] == [
        ("Quentin Tarantino", 2),
        ("Christopher Nolan", 1),
        ("Steven Spielberg", 1),
    ]


def test_aggregate_by_director_labels_unknown(store):
    add_film(store, "Anonymous", directorId=0)
    result = QueryEngine(store).aggregate_by_director()
    assert result[0].label == "Director #0"


def test_aggregate_by_year(query):
    assert [r.label for r in query.aggregate_by_year()] == ["1993", "1994", "2006", "2009", "2010"]


def test_aggregate_by_genre_first_occurrence_order(query):
    assert [(r.label, r.count) for r in query.aggregate_by_genre()] == [
        ("Science-fiction", 2),
        ("Thriller", 2),
        ("Adventure", 1),
    ]


def test_rating_histogram_sums_to_film_count(query):
    buckets = query.rating_histogram()
    assert [b.label for b in buckets] == ["0-2", "2-4", "4-6", "6-8", "8-10"]
    assert sum(b.count for b in buckets) == 5
    assert buckets[4].count == 4
    assert buckets[3].count == 1


@pytest.mark.parametrize(
    "rating, bucket",
    [(0.0, "0-2"), (2.0, "2-4"), (7.99, "6-8"), (8.0, "8-10"), (10.0, "8-10")],
)
def test_rating_histogram_bucket_edges(store, rating, bucket):
    add_film(store, "Edge", rating=rating)
    counts = {b.label: b.count for b in QueryEngine(store).rating_histogram()}
    assert counts[bucket] == 1


def test_monthly_additions(query):
    months = query.monthly_additions()
    assert len(months) == 12
    assert months[:4] == [1, 1, 2, 1]
    assert sum(months) == 5


def test_monthly_additions_missing_timestamp_counts_as_now():
    store = CatalogStore(films=[Film(id=1, title="Undated", year=1950)])
    months = QueryEngine(store).monthly_additions(now=datetime(2024, 6, 1, tzinfo=timezone.utc))
    assert months[5] == 1


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def test_dashboard_kpis(query):
    kpis = query.dashboard_kpis()
    assert kpis.films == 5
    assert kpis.directors == 5
    assert kpis.average_rating == 8.5
    assert kpis.total_duration_hours == 12


def test_dashboard_kpis_empty(store):
    kpis = QueryEngine(store).dashboard_kpis()
    assert kpis.films == 0
    assert kpis.average_rating == 0.0
    assert kpis.total_duration_hours == 0


def test_quick_stats(query):
    stats = query.quick_stats()
    assert stats.oldest_year == 1993
    assert stats.newest_year == 2010
    assert stats.average_duration == 148
    assert stats.genre_count == 3


def test_quick_stats_empty(store):
    stats = QueryEngine(store).quick_stats()
    assert stats.oldest_year is None
    assert stats.average_duration is None
    assert stats.genre_count == 0


def test_storage_usage(query):
    usage = query.storage_usage()
    assert usage.quota_bytes == STORAGE_QUOTA_BYTES
    assert usage.used_bytes > 0
    assert 0 < usage.percent_used < 1


def test_storage_usage_empty(store):
    usage = QueryEngine(store).storage_usage()
    assert usage.used_bytes == len("[]") * 2
