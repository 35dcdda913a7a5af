"""Weather lookup exposed to the chat model as a tool."""

from __future__ import annotations

import logging
from typing import Optional

from langchain_core.tools import BaseTool, tool

from ragbot.geo.resolver import GeoResolver, ResolutionError, ResolutionFailure
from ragbot.utils import log_with_prefix

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "OpenWeatherMap API key is missing. The user must set the OPENWEATHER_API_KEY "
    "environment variable and restart the application before trying to ask for the weather again."
)
FAILURE_MESSAGE = "Error during weather retrieval."


class WeatherTool:
    """Current weather for a city. Never raises: every failure becomes a sentence the model can relay."""

    def __init__(self, resolver: GeoResolver, client, api_key: Optional[str]):
        self.resolver = resolver
        self.client = client
        self.api_key = api_key

    async def get_weather(self, city: str) -> str:
        try:
            geo = await self.resolver.resolve(city)
            # Coordinates may come from cache even without a key, the weather call still needs one
            if not self.api_key:
                return MISSING_KEY_MESSAGE
            data = await self.client.current_weather(geo.latitude, geo.longitude, self.api_key)
            temperature = data["main"]["temp"]
            description = data["weather"][0]["description"]
        except ResolutionError as e:
            if e.reason is ResolutionFailure.MISSING_CREDENTIAL:
                return MISSING_KEY_MESSAGE
            log_with_prefix(logger, logging.WARNING, "WeatherTool", f"Failed to resolve {city}: {e}")
            return FAILURE_MESSAGE
        except Exception as e:
            log_with_prefix(logger, logging.WARNING, "WeatherTool", f"Failed to get information from API. {e}")
            return FAILURE_MESSAGE

        return f"The weather in {city}: {temperature}°C, {description}."

    def as_tool(self) -> BaseTool:
        """Wrap `get_weather` as a LangChain tool for `bind_tools`."""

        async def get_weather(city: str) -> str:
            """Get the current weather for a city.

            Args:
                city: Name of the city, e.g. "Sofia".
            """
            return await self.get_weather(city)

        return tool(get_weather)
