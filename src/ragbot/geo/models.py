from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class GeoRecord:
    latitude: float
    longitude: float

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "GeoRecord":
        """Build a record from one entry of the geocoding response."""
        return cls(latitude=float(item["lat"]), longitude=float(item["lon"]))

    @classmethod
    def from_json(cls, text: str) -> "GeoRecord":
        """Parse a payload written by `to_json`. Raises ValueError if it is malformed."""
        try:
            return cls.from_api(json.loads(text))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid geo payload: {text!r}") from e

    def to_json(self) -> str:
        # Same shape as the geocoding API so stored payloads and responses parse alike
        return json.dumps({"lat": self.latitude, "lon": self.longitude})
