from __future__ import annotations

from typing import Any, Dict, List, Optional

import aiohttp

GEOCODE_PATH = "/geo/1.0/direct"
WEATHER_PATH = "/data/2.5/weather"


class OpenWeatherClient:
    """Thin async client for the OpenWeatherMap geocoding and current-weather endpoints.

    The API key is passed per call so callers own the credential. Each request
    uses a short-lived ClientSession unless one is supplied, and HTTP errors are
    raised as aiohttp.ClientResponseError.
    """

    def __init__(
        self,
        base_url: str = "https://api.openweathermap.org",
        timeout: float = 15.0,
        units: str = "metric",
        lang: str = "bg",
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.units = units
        self.lang = lang
        self._session = session

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        if self._session is not None:
            async with self._session.get(url, params=params) as r:
                r.raise_for_status()
                return await r.json()

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        headers = {"User-Agent": "ragbot/0.1"}
        async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
            async with session.get(url, params=params) as r:
                r.raise_for_status()
                return await r.json()

    async def geocode(self, city: str, api_key: str, limit: int = 1) -> List[Dict[str, Any]]:
        """Look up coordinates for `city`. Returns the (possibly empty) list of matches."""
        data = await self._get_json(GEOCODE_PATH, {"q": city, "limit": str(limit), "appid": api_key})
        if not isinstance(data, list):
            raise ValueError(f"Unexpected geocoding response: {data!r}")
        return data

    async def current_weather(self, latitude: float, longitude: float, api_key: str) -> Dict[str, Any]:
        """Fetch current weather at the given coordinates."""
        params = {
            "lat": str(latitude),
            "lon": str(longitude),
            "appid": api_key,
            "units": self.units,
            "lang": self.lang,
        }
        return await self._get_json(WEATHER_PATH, params)


def build_client() -> OpenWeatherClient:
    """Create a client from the global configuration."""
    from ragbot.config import config

    return OpenWeatherClient(
        base_url=config.openweather_base_url,
        timeout=config.request_timeout,
        units=config.weather_units,
        lang=config.weather_lang,
    )
