"""Centralized configuration management for ragbot."""

import os
from typing import Optional


class Config:
    """Singleton configuration class for all environment variables."""

    _instance: Optional["Config"] = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return
        self._initialized = True

        # Vector store configuration
        self.chroma_persist_directory: str = os.environ.get("CHROMA_PERSIST_DIRECTORY", "./chroma_data")
        self.chroma_server_url: str = os.environ.get("CHROMA_SERVER_URL", "")

        # Ollama configuration
        self.ollama_base_url: str = os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
        self.ollama_model: str = os.environ.get("OLLAMA_MODEL", "mistral")
        self.ollama_embed_model: str = os.environ.get("OLLAMA_EMBED_MODEL", "mistral")
        # "ollama" or "hash" (offline, deterministic)
        self.embedding_backend: str = os.environ.get("RAGBOT_EMBEDDINGS", "ollama").lower()

        # OpenWeatherMap configuration (free key: https://openweathermap.org/)
        self.openweather_api_key: str = os.environ.get("OPENWEATHER_API_KEY", "")
        self.openweather_base_url: str = os.environ.get("OPENWEATHER_BASE_URL", "https://api.openweathermap.org")
        self.weather_units: str = os.environ.get("WEATHER_UNITS", "metric")
        self.weather_lang: str = os.environ.get("WEATHER_LANG", "bg")
        self.request_timeout: float = float(os.environ.get("RAGBOT_REQUEST_TIMEOUT", "15"))

        # CLI configuration
        self.log_level: str = os.environ.get("LOG_LEVEL", "WARNING").upper()


# Global singleton instance
config = Config()
