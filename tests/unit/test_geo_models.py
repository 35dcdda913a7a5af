"""Unit tests for GeoRecord."""

import json

import pytest

from ragbot.geo.models import GeoRecord


def test_from_api_reads_lat_lon():
    record = GeoRecord.from_api({"name": "Sofia", "lat": 42.6977, "lon": 23.3219, "country": "BG"})
    assert record == GeoRecord(latitude=42.6977, longitude=23.3219)


def test_to_json_uses_api_shape():
    assert json.loads(GeoRecord(42.7, 23.32).to_json()) == {"lat": 42.7, "lon": 23.32}


@pytest.mark.parametrize("payload", ["", "not json", "[]", '{"lat": 1.0}', '{"lat": "north", "lon": 2}'])
def test_from_json_rejects_malformed(payload):
    with pytest.raises(ValueError):
        GeoRecord.from_json(payload)


def test_record_is_immutable():
    record = GeoRecord(1.0, 2.0)
    with pytest.raises(AttributeError):
        record.latitude = 3.0
