from __future__ import annotations

import httpx
import pytest

from catalog_sniper.config import FetchSettings
from catalog_sniper.engine.fetcher import Fetcher
from catalog_sniper.errors import (
    HttpStatusError,
    NetworkError,
    PayloadError,
    RequestTimeoutError,
)

URL = "https://catalog.example.com/v1/search"


@pytest.fixture
def delays(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr("catalog_sniper.engine.fetcher.time.sleep", recorded.append)
    return recorded


@pytest.fixture
def fetcher(fast_settings: FetchSettings):
    instance = Fetcher(fast_settings)
    yield instance
    instance.close()


def _response(status: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", URL), **kwargs)


def test_fetch_json_returns_payload(monkeypatch, fetcher, delays) -> None:
    captured: list[str] = []

    def fake_get(url):
        captured.append(url)
        return _response(json={"data": [{"id": 1}], "nextPageCursor": None})

    monkeypatch.setattr(fetcher._client, "get", fake_get)
    payload = fetcher.fetch_json(URL)
    assert payload == {"data": [{"id": 1}], "nextPageCursor": None}
    assert captured == [URL]
    assert delays == []


def test_client_uses_configured_timeout_and_user_agent(fetcher) -> None:
    assert fetcher._client.timeout.read == 5
    assert fetcher._client.headers["User-Agent"] == fetcher.settings.user_agent


def test_network_errors_retry_with_linear_backoff(monkeypatch, fetcher, delays) -> None:
    calls = {"count": 0}

    def flaky_get(url):
        calls["count"] += 1
        if calls["count"] < 3:
            raise httpx.ConnectError("connection refused")
        return _response(json={"data": []})

    monkeypatch.setattr(fetcher._client, "get", flaky_get)
    assert fetcher.fetch_json(URL) == {"data": []}
    assert calls["count"] == 3
    assert delays == [0.5, 1.0]


def test_network_errors_surface_after_max_attempts(monkeypatch, fetcher, delays) -> None:
    calls = {"count": 0}

    def failing_get(url):
        calls["count"] += 1
        raise httpx.ConnectError(f"refused #{calls['count']}")

    monkeypatch.setattr(fetcher._client, "get", failing_get)
    with pytest.raises(NetworkError) as excinfo:
        fetcher.fetch_json(URL, max_attempts=2)
    assert calls["count"] == 2
    assert delays == [0.5]
    assert "refused #2" in str(excinfo.value)
    assert excinfo.value.url == URL


def test_timeout_is_not_retried(monkeypatch, fetcher, delays) -> None:
    calls = {"count": 0}

    def slow_get(url):
        calls["count"] += 1
        raise httpx.ReadTimeout("timed out")

    monkeypatch.setattr(fetcher._client, "get", slow_get)
    with pytest.raises(RequestTimeoutError) as excinfo:
        fetcher.fetch_json(URL)
    assert isinstance(excinfo.value, TimeoutError)
    assert calls["count"] == 1
    assert delays == []


@pytest.mark.parametrize("status", [301, 404, 429, 500, 503])
def test_non_success_status_is_not_retried(monkeypatch, fetcher, delays, status) -> None:
    calls = {"count": 0}

    def bad_get(url):
        calls["count"] += 1
        return _response(status, text="nope")

    monkeypatch.setattr(fetcher._client, "get", bad_get)
    with pytest.raises(HttpStatusError) as excinfo:
        fetcher.fetch_json(URL)
    assert excinfo.value.status_code == status
    assert calls["count"] == 1


@pytest.mark.parametrize("body", ["not json", "[1, 2, 3]", '"text"'])
def test_malformed_body_raises_payload_error(monkeypatch, fetcher, delays, body) -> None:
    monkeypatch.setattr(fetcher._client, "get", lambda url: _response(text=body))
    with pytest.raises(PayloadError):
        fetcher.fetch_json(URL)
    assert delays == []


def test_redirect_loop_becomes_network_error(monkeypatch, fetcher, delays) -> None:
    calls = {"count": 0}

    def looping_get(url):
        calls["count"] += 1
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=httpx.Request("GET", url))

    monkeypatch.setattr(fetcher._client, "get", looping_get)
    with pytest.raises(NetworkError) as excinfo:
        fetcher.fetch_json(URL)
    assert calls["count"] == 1
    assert delays == []
    assert excinfo.value.url == URL


def test_undecodable_body_becomes_payload_error(monkeypatch, fetcher, delays) -> None:
    def broken_get(url):
        raise httpx.DecodingError("Error -3 while decompressing data", request=httpx.Request("GET", url))

    monkeypatch.setattr(fetcher._client, "get", broken_get)
    with pytest.raises(PayloadError):
        fetcher.fetch_json(URL)
    assert delays == []
