"""Pytest configuration."""

import warnings

import pytest

from ragbot.vectorstore.chroma_memory import MemoryRecord, MemorySearchResult

# Filter out coroutine warnings from mocked CLI tests
warnings.filterwarnings("ignore", message=".*coroutine.*was never awaited.*", category=RuntimeWarning)
warnings.filterwarnings("ignore", message=".*Enable tracemalloc to get the object allocation traceback.*", category=RuntimeWarning)


class FakeMemoryStore:
    """In-memory stand-in for ChromaMemoryStore.

    Search returns preset `candidates` first, then saved records, mimicking a
    similarity ranking the test controls.
    """

    def __init__(self, candidates=None):
        self.candidates = list(candidates or [])
        self.saved = []
        self.searches = []

    async def search(self, collection, query, limit=None):
        self.searches.append((collection, query))
        for record in self.candidates + [r for r in self.saved if r.collection == collection]:
            yield MemorySearchResult(record=record, score=0.0 if record.id == query else 0.5)

    async def save(self, collection, text, id):
        self.saved.append(MemoryRecord(collection=collection, text=text, id=id))
        return f"row-{len(self.saved)}"


class FakeGeoClient:
    """Records geocode/weather calls and returns canned responses."""

    def __init__(self, geocode_result=None, weather_result=None, geocode_error=None, weather_error=None):
        self.geocode_result = geocode_result if geocode_result is not None else []
        self.weather_result = weather_result
        self.geocode_error = geocode_error
        self.weather_error = weather_error
        self.geocode_calls = []
        self.weather_calls = []

    async def geocode(self, city, api_key, limit=1):
        self.geocode_calls.append((city, api_key, limit))
        if self.geocode_error is not None:
            raise self.geocode_error
        return self.geocode_result

    async def current_weather(self, latitude, longitude, api_key):
        self.weather_calls.append((latitude, longitude, api_key))
        if self.weather_error is not None:
            raise self.weather_error
        return self.weather_result


@pytest.fixture
def memory_store():
    """Provide an empty fake vector memory."""
    return FakeMemoryStore()


@pytest.fixture
def sofia_client():
    """Geocoder that knows Sofia and reports mild weather."""
    return FakeGeoClient(
        geocode_result=[{"name": "Sofia", "lat": 42.70, "lon": 23.32, "country": "BG"}],
        weather_result={"main": {"temp": 21.5}, "weather": [{"description": "clear sky"}]},
    )


@pytest.fixture
def temp_chroma_dir(tmp_path):
    """Provide a temporary Chroma directory."""
    return str(tmp_path / "chroma")
