# COMPONENT: QUERY ENGINE
# REQUIREMENTS SATISFIED: search/filter/sort and dashboard aggregates over the catalog
"""
src/cinetech/services/query.py

Read-only queries over a CatalogStore.

Nothing is cached between calls: every method recomputes from the store's
current collections, so results always reflect the last committed
mutation.

Key responsibilities:
    - Free-text search with genre filter and sort options
    - Most recently added films
    - Per-director film count and average rating
    - Chart series: films per director, year, genre, rating bucket, month
    - Dashboard KPIs, quick statistics and storage usage
"""
import json
import unicodedata
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from cinetech.schemas.models import (
    DashboardKpis,
    DirectorRow,
    DirectorStats,
    Film,
    LabelCount,
    QuickStats,
    StorageUsage,
)

STORAGE_QUOTA_BYTES = 5 * 1024 * 1024

RATING_BUCKETS = ("0-2", "2-4", "4-6", "6-8", "8-10")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def collation_key(text: str) -> Tuple[str, str, str]:
    """
    Locale-style ordering key: accents and case are ignored first, then
    accented forms sort after plain ones, then lowercase before uppercase.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, text.casefold(), text.swapcase()


def _created(film: Film) -> datetime:
    ts = film.created_at
    if ts is None:
        return _OLDEST
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _average(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return round(sum(values) / len(values), 1)


_SORTS: Dict[str, Tuple[Callable[[Film], object], bool]] = {
    "title-asc": (lambda f: collation_key(f.title), False),
    "title-desc": (lambda f: collation_key(f.title), True),
    "year-asc": (lambda f: f.year, False),
    "year-desc": (lambda f: f.year, True),
    "rating-asc": (lambda f: f.rating, False),
    "rating-desc": (lambda f: f.rating, True),
}

SORT_KEYS = tuple(_SORTS)


class QueryEngine:
    def __init__(self, store):
        self.store = store

    # ------------------------------------------------------------------ #
    # Search
    # ------------------------------------------------------------------ #
    def search(self, term: str = "", genre_filter: str = "", sort_key: str = "title-asc") -> List[Film]:
        """
        Filter by a case-insensitive substring over title, director name,
        year and genre, restrict to an exact genre when given, then sort.
        An unrecognized sort key keeps collection order.
        """
        needle = (term or "").lower()
        names = {d.id: d.name.lower() for d in self.store.directors}

        def matches(film: Film) -> bool:
            if genre_filter and film.genre != genre_filter:
                return False
            if not needle:
                return True
            return (
                needle in film.title.lower()
                or needle in names.get(film.director_id, "")
                or needle in str(film.year)
                or needle in film.genre.lower()
            )

        results = [f for f in self.store.films if matches(f)]

        sort = _SORTS.get(sort_key)
        if sort is not None:
            key, reverse = sort
            results.sort(key=key, reverse=reverse)
        return results

    def recent_films(self, n: int = 5) -> List[Film]:
        return sorted(self.store.films, key=_created, reverse=True)[: max(n, 0)]

    # ------------------------------------------------------------------ #
    # Directors
    # ------------------------------------------------------------------ #
    def director_stats(self, director_id: int) -> DirectorStats:
        ratings = [f.rating for f in self.store.films_for_director(director_id)]
        return DirectorStats(count=len(ratings), average_rating=_average(ratings))

    def director_table(self) -> List[DirectorRow]:
        rows = []
        for d in self.store.directors:
            stats = self.director_stats(d.id)
            rows.append(
                DirectorRow(director=d, film_count=stats.count, average_rating=stats.average_rating)
            )
        return rows

    def director_name(self, director_id: int) -> str:
        director = self.store.find_director(director_id)
        return director.name if director is not None else f"Director #{director_id}"

    # ------------------------------------------------------------------ #
    # Chart series
    # ------------------------------------------------------------------ #
    def aggregate_by_director(self, top_n: int = 5) -> List[LabelCount]:
        counts = Counter(f.director_id for f in self.store.films)
        # ascending id first so equal counts keep a stable, id-ordered tie break
        ordered = sorted(sorted(counts.items()), key=lambda kv: kv[1], reverse=True)
        return [
            LabelCount(label=self.director_name(director_id), count=count)
            for director_id, count in ordered[: max(top_n, 0)]
        ]

    def aggregate_by_year(self) -> List[LabelCount]:
        counts = Counter(f.year for f in self.store.films)
        return [LabelCount(label=str(year), count=counts[year]) for year in sorted(counts)]

    def aggregate_by_genre(self) -> List[LabelCount]:
        counts: Dict[str, int] = {}
        for f in self.store.films:
            counts[f.genre] = counts.get(f.genre, 0) + 1
        return [LabelCount(label=genre, count=count) for genre, count in counts.items()]

    def rating_histogram(self) -> List[LabelCount]:
        buckets = [0] * len(RATING_BUCKETS)
        for f in self.store.films:
            if 0.0 <= f.rating <= 10.0:
                # [8, 10] is closed on both ends
                buckets[min(int(f.rating // 2), 4)] += 1
        return [LabelCount(label=label, count=n) for label, n in zip(RATING_BUCKETS, buckets)]

    def monthly_additions(self, now: Optional[datetime] = None) -> List[int]:
        """Films added per calendar month (UTC), ignoring the year."""
        now = now or datetime.now(timezone.utc)
        months = [0] * 12
        for f in self.store.films:
            ts = f.created_at or now
            if ts.tzinfo is not None:
                ts = ts.astimezone(timezone.utc)
            months[ts.month - 1] += 1
        return months

    # ------------------------------------------------------------------ #
    # Dashboard
    # ------------------------------------------------------------------ #
    def dashboard_kpis(self) -> DashboardKpis:
        films = self.store.films
        return DashboardKpis(
            films=len(films),
            directors=len(self.store.directors),
            average_rating=_average([f.rating for f in films]) or 0.0,
            total_duration_hours=round(sum(f.duration for f in films) / 60),
        )

    def quick_stats(self) -> QuickStats:
        films = self.store.films
        if not films:
            return QuickStats()
        years = [f.year for f in films]
        return QuickStats(
            oldest_year=min(years),
            newest_year=max(years),
            average_duration=round(sum(f.duration for f in films) / len(films)),
            genre_count=len({f.genre for f in films}),
        )

    def storage_usage(self) -> StorageUsage:
        films = json.dumps([f.to_json() for f in self.store.films])
        directors = json.dumps([d.model_dump(mode="json") for d in self.store.directors])
        used = len(films.encode("utf-8")) + len(directors.encode("utf-8"))
        return StorageUsage(
            used_bytes=used,
            quota_bytes=STORAGE_QUOTA_BYTES,
            percent_used=round(used / STORAGE_QUOTA_BYTES * 100, 2),
        )
