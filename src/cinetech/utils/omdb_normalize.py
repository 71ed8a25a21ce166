# COMPONENT: EXTERNAL RECORD NORMALIZATION
# REQUIREMENTS SATISFIED: mapping of OMDb "N/A" markers onto catalog defaults
"""
src/cinetech/utils/omdb_normalize.py

Normalizes raw OMDb detail records into the field set of a catalog film.

OMDb reports every missing field as the literal string "N/A". This module
detects those markers and substitutes the catalog's own defaults:

    Poster      "N/A" → placeholder poster URI
    Genre       "N/A" → "Unspecified"   (otherwise first listed genre)
    Runtime     "N/A" → 120             (otherwise leading minutes)
    imdbRating  "N/A" → 7.0
    Year        "N/A" → current year    (otherwise leading 4 digits)
    Plot        "N/A" → ""
    Director    "N/A" → None            (caller assigns the sentinel id)
    Country     "N/A" → ""              (otherwise first listed country)

The functions are pure: nothing here touches catalog state.
"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from cinetech.schemas.models import PLACEHOLDER_POSTER

NOT_AVAILABLE = "N/A"
DEFAULT_GENRE = "Unspecified"
DEFAULT_DURATION = 120
DEFAULT_RATING = 7.0

_LEADING_INT = re.compile(r"^\s*(\d+)")


def is_not_available(value: Any) -> bool:
    if value is None:
        return True
    s = str(value).strip()
    return not s or s.upper() == NOT_AVAILABLE


def available(value: Any, default: str = "") -> str:
    return default if is_not_available(value) else str(value).strip()


def first_token(value: Any, default: str = "") -> str:
    """First comma-separated entry: "Action, Sci-Fi" -> "Action"."""
    if is_not_available(value):
        return default
    token = str(value).split(",", 1)[0].strip()
    return token or default


def parse_leading_int(value: Any, default: int) -> int:
    """ "148 min" -> 148, "2010–2014" -> 2010, anything else -> default."""
    if is_not_available(value):
        return default
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else default


def parse_rating(value: Any, default: float = DEFAULT_RATING) -> float:
    if is_not_available(value):
        return default
    try:
        rating = float(str(value).strip())
    except ValueError:
        return default
    if not 0.0 <= rating <= 10.0:
        return default
    return rating


def normalize_external_film(raw: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Map an OMDb detail payload onto catalog film fields plus the director
    details needed to resolve or synthesize a Director record.

    Returns a dict with keys: title, year, genre, duration, rating, poster,
    synopsis, director_name (None when unavailable), nationality.
    """
    now = now or datetime.now(timezone.utc)
    title = available(raw.get("Title"))

    director_name = None if is_not_available(raw.get("Director")) else str(raw["Director"]).strip()

    return {
        "title": title,
        "year": parse_leading_int(raw.get("Year"), now.year),
        "genre": first_token(raw.get("Genre"), DEFAULT_GENRE),
        "duration": parse_leading_int(raw.get("Runtime"), DEFAULT_DURATION),
        "rating": parse_rating(raw.get("imdbRating")),
        "poster": available(raw.get("Poster"), PLACEHOLDER_POSTER),
        "synopsis": available(raw.get("Plot")),
        "director_name": director_name,
        "nationality": first_token(raw.get("Country")),
    }
