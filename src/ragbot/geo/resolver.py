"""City name to coordinates resolution with a two-tier cache in front of the geocoder.

Lookup order for `GeoResolver.resolve`:

1. In-process map keyed by the exact city string.
2. Vector memory: similarity search in a fixed collection, accepting only a
   record whose id equals the city string exactly.
3. Remote geocoding, whose first result is written back to the vector memory
   and to the in-process map.

Records are never updated or deleted once written.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Dict, Optional

import aiohttp

from ragbot.geo.models import GeoRecord
from ragbot.utils import log_timing, log_with_prefix

logger = logging.getLogger(__name__)

__all__ = ["GEO_COLLECTION", "GeoResolver", "ResolutionError", "ResolutionFailure"]

GEO_COLLECTION = "my-first-ragbot.geo-coords"


class ResolutionFailure(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    NOT_FOUND = "not_found"
    UPSTREAM_FAILURE = "upstream_failure"
    TIMEOUT = "timeout"


class ResolutionError(Exception):
    """Raised when a city cannot be resolved and the remote geocoder was needed."""

    def __init__(self, reason: ResolutionFailure, message: str):
        super().__init__(message)
        self.reason = reason


class GeoResolver:
    """Resolve city names to GeoRecords, caching in memory and in the vector store.

    Concurrent calls for the same uncached city on one resolver share a single
    in-flight lookup. Separate resolvers (or processes) may still both reach
    the geocoder and both write a row; duplicate rows are harmless.
    """

    def __init__(
        self,
        memory,
        client,
        api_key: Optional[str],
        collection: str = GEO_COLLECTION,
        memory_timeout: float = 15.0,
    ):
        self.memory = memory
        self.client = client
        self.api_key = api_key
        self.collection = collection
        # Bounds each vector-store search and save, in seconds
        self.memory_timeout = memory_timeout
        self._cache: Dict[str, GeoRecord] = {}
        self._inflight: Dict[str, asyncio.Future] = {}

    def cached(self, city: str) -> Optional[GeoRecord]:
        """Return the in-memory entry for `city`, if any."""
        return self._cache.get(city)

    async def resolve(self, city: str) -> GeoRecord:
        record = self._cache.get(city)
        if record is not None:
            log_with_prefix(logger, logging.DEBUG, "GeoResolver", f"Memory cache hit for {city}")
            return record

        pending = self._inflight.get(city)
        if pending is not None:
            log_with_prefix(logger, logging.DEBUG, "GeoResolver", f"Joining in-flight lookup for {city}")
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._resolve_uncached(city))
        self._inflight[city] = task
        task.add_done_callback(lambda t: self._forget(city, t))
        # A cancelled caller leaves the shared lookup running
        return await asyncio.shield(task)

    def _forget(self, city: str, task: asyncio.Future) -> None:
        if self._inflight.get(city) is task:
            del self._inflight[city]
        # Marks a failure as retrieved when every caller was cancelled
        if not task.cancelled():
            task.exception()

    async def _resolve_uncached(self, city: str) -> GeoRecord:
        record = await self._search_memory(city)
        if record is None:
            record = await self._geocode(city)
            await self._write_back(city, record)
        self._cache[city] = record
        return record

    async def _first_exact_match(self, city: str) -> Optional[GeoRecord]:
        async for result in self.memory.search(self.collection, city):
            # Near matches may be a different city entirely
            if result.record.id != city:
                continue
            try:
                return GeoRecord.from_json(result.record.text)
            except ValueError as e:
                log_with_prefix(logger, logging.WARNING, "GeoResolver", f"Skipping unreadable record for {city}: {e}")
        return None

    async def _search_memory(self, city: str) -> Optional[GeoRecord]:
        start = time.time()
        log_with_prefix(logger, logging.DEBUG, "GeoResolver", f"Checking memory for {city}")
        try:
            record = await asyncio.wait_for(self._first_exact_match(city), self.memory_timeout)
        except asyncio.TimeoutError:
            log_with_prefix(logger, logging.WARNING, "GeoResolver", f"Memory search for {city} timed out after {self.memory_timeout}s")
            return None
        except Exception as e:
            log_with_prefix(logger, logging.WARNING, "GeoResolver", f"Memory search failed for {city}: {e}")
            return None
        if record is None:
            log_timing(logger, "GeoResolver", start, f"No exact memory match for {city}")
        else:
            log_timing(logger, "GeoResolver", start, f"Got {city} coordinates from memory")
        return record

    async def _geocode(self, city: str) -> GeoRecord:
        if not self.api_key:
            log_with_prefix(logger, logging.WARNING, "GeoResolver", "Missing API key, cannot call the geocoding API")
            raise ResolutionError(ResolutionFailure.MISSING_CREDENTIAL, "Missing API key.")

        start = time.time()
        log_with_prefix(logger, logging.DEBUG, "GeoResolver", f"Getting {city} from API")
        try:
            results = await self.client.geocode(city, self.api_key, limit=1)
            if not results:
                raise ResolutionError(ResolutionFailure.NOT_FOUND, f"No coordinates found for {city!r}")
            record = GeoRecord.from_api(results[0])
        except ResolutionError:
            raise
        except asyncio.TimeoutError as e:
            raise ResolutionError(ResolutionFailure.TIMEOUT, f"Geocoding {city!r} timed out") from e
        except (aiohttp.ClientError, ValueError, KeyError, TypeError) as e:
            raise ResolutionError(ResolutionFailure.UPSTREAM_FAILURE, f"Geocoding {city!r} failed: {e}") from e
        log_timing(logger, "GeoResolver", start, f"Got {record.to_json()} for {city} from API")
        return record

    async def _write_back(self, city: str, record: GeoRecord) -> None:
        try:
            await asyncio.wait_for(self.memory.save(self.collection, record.to_json(), city), self.memory_timeout)
        except asyncio.TimeoutError:
            log_with_prefix(logger, logging.WARNING, "GeoResolver", f"Saving {city} to memory timed out after {self.memory_timeout}s")
        except Exception as e:
            log_with_prefix(logger, logging.WARNING, "GeoResolver", f"Could not save {city} to memory: {e}")
