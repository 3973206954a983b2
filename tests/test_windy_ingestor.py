from datetime import datetime, timezone
import json

import httpx
import pytest

from app.ingestors.windy import WindyIngestor, parse_windy_payload

PAYLOAD = {
    "ts": [1718388000000, 1718391600000],
    "units": {"wind_u-surface": "m*s-1"},
    "wind_u-surface": [3.0, 0.0],
    "wind_v-surface": [4.0, -10.0],
    "lclouds-surface": [0.1, 0.9],
    "mclouds-surface": [0.0, 0.9],
    "hclouds-surface": [0.2, 0.9],
    "temp-surface": [293.15, 290.0],
    "dewpoint-surface": [283.15, 284.0],
    "pressure-surface": [101300.0, 101250.0],
    "precip-surface": [0.0, 0.0],
}


def test_parse_windy_payload():
    samples = parse_windy_payload(PAYLOAD)

    assert len(samples) == 2
    assert samples[0].timestamp == datetime(2024, 6, 14, 18, 0, tzinfo=timezone.utc)
    assert samples[0].wind_speed == pytest.approx(11.185)
    assert samples[0].temperature == pytest.approx(68.0)
    assert samples[0].effective_cloud_cover == pytest.approx(10.0)
    assert samples[1].wind_direction == pytest.approx(0.0)
    assert samples[0].wind_direction == pytest.approx(216.87, abs=0.01)
    assert samples[1].effective_cloud_cover == pytest.approx(90.0)


def test_parse_windy_payload_skips_hours_without_wind():
    payload = {
        "ts": [1718388000000, 1718391600000, 1718395200000],
        "wind_u-surface": [None, 3.0, 2.0],
        "wind_v-surface": [4.0, None, 2.0],
        "lclouds-surface": [0.1, 0.1, 0.1],
    }

    samples = parse_windy_payload(payload)

    assert [sample.timestamp.hour for sample in samples] == [20]
    assert samples[0].wind_speed > 0


def test_parse_windy_payload_without_wind_series():
    payload = {"ts": [1718388000000], "wind_u-surface": [None], "wind_v-surface": [None]}

    assert parse_windy_payload(payload) == []


@pytest.mark.anyio
async def test_get_forecast_posts_key_and_parameters(monkeypatch):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=PAYLOAD)

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    def fake_client(**kwargs):
        return real_client(transport=transport, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", fake_client)

    ingestor = WindyIngestor(api_key="test-key", base_url="https://windy.test/point-forecast")
    forecast = await ingestor.get_forecast(37.77, -122.42)

    assert forecast.source == "windy.com"
    assert forecast.stats.data_points == 2
    assert captured["method"] == "POST"
    assert captured["body"]["key"] == "test-key"
    assert captured["body"]["model"] == "gfs"
    assert "wind" in captured["body"]["parameters"]


@pytest.mark.anyio
async def test_get_forecast_requires_api_key(monkeypatch):
    def fail_client(**kwargs):  # pragma: no cover - must not be reached
        raise AssertionError("no request expected without a key")

    monkeypatch.setattr(httpx, "AsyncClient", fail_client)

    with pytest.raises(RuntimeError, match="Windy API key not configured"):
        await WindyIngestor(api_key="").get_forecast(37.77, -122.42)


@pytest.mark.anyio
async def test_get_forecast_maps_request_errors(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    def fake_client(**kwargs):
        return real_client(transport=transport, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", fake_client)

    ingestor = WindyIngestor(api_key="test-key", base_url="https://windy.test/point-forecast")
    with pytest.raises(RuntimeError, match="Windy request failed"):
        await ingestor.get_forecast(37.77, -122.42)
