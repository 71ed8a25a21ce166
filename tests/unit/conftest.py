# ---------------------------------------------------------------------------
# Shared fixtures for the catalog unit tests.
#
#   - store:        empty CatalogStore over in-memory storage
#   - sample_store: CatalogStore preloaded with the five sample films and
#                   directors (ids 1-5)
#   - omdb_record:  factory for OMDb detail payloads
# ---------------------------------------------------------------------------
import pytest

from cinetech.services.catalog import CatalogStore
from cinetech.services.sample_data import sample_catalog
from cinetech.services.storage import MemoryStorage


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return CatalogStore.load(storage)


@pytest.fixture
def sample_store(store):
    store.replace_all(sample_catalog())
    return store


@pytest.fixture
def omdb_record():
    def make(**overrides):
        record = {
            "Title": "Tenet",
            "Year": "2020",
            "Genre": "Action, Sci-Fi, Thriller",
            "Runtime": "150 min",
            "imdbRating": "7.3",
            "Poster": "https://example.com/tenet.jpg",
            "Plot": "Armed with only one word, Tenet, a protagonist fights for the survival of the world.",
            "Director": "Christopher Nolan",
            "Country": "United Kingdom, United States",
            "Language": "English, Russian",
            "imdbID": "tt6723592",
            "Response": "True",
        }
        record.update(overrides)
        return record

    return make
