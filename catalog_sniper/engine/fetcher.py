"""HTTP fetching with bounded retries for catalog API pages."""

from __future__ import annotations

import json
import time
from typing import Any

import httpx
import structlog

from ..config import FetchSettings
from ..errors import HttpStatusError, NetworkError, PayloadError, RequestTimeoutError


class Fetcher:
    """Issue GET requests and return decoded JSON objects.

    Only transport-level failures are retried, with a delay of
    ``retry_base_delay * attempt`` seconds before the next attempt. Timeouts,
    non-success statuses and undecodable bodies fail immediately.
    """

    def __init__(
        self,
        settings: FetchSettings | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings or FetchSettings()
        self.logger = logger or structlog.get_logger("catalog_sniper.fetcher")
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=self.settings.timeout,
            headers={"User-Agent": self.settings.user_agent, "Accept": "application/json"},
        )

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_json(self, url: str, max_attempts: int | None = None) -> dict[str, Any]:
        attempts = max_attempts or self.settings.max_attempts
        attempt = 1
        while True:
            try:
                response = self._client.get(url)
            except httpx.TimeoutException as exc:
                self.logger.warning("fetch_timeout", url=url, attempt=attempt, error=str(exc))
                raise RequestTimeoutError(
                    f"Request timeout after {self.settings.timeout}s", url=url
                ) from exc
            except httpx.TransportError as exc:
                self.logger.warning(
                    "fetch_error", url=url, attempt=attempt, max_attempts=attempts, error=str(exc)
                )
                if attempt >= attempts:
                    raise NetworkError(str(exc) or exc.__class__.__name__, url=url) from exc
                time.sleep(self.settings.retry_base_delay * attempt)
                attempt += 1
                continue
            except httpx.DecodingError as exc:
                raise PayloadError(f"Undecodable response body: {exc}", url=url) from exc
            except httpx.RequestError as exc:
                # redirect loops and other non-transport failures are not retried
                self.logger.warning("fetch_error", url=url, attempt=attempt, error=str(exc))
                raise NetworkError(str(exc) or exc.__class__.__name__, url=url) from exc
            return self._decode(response, url)

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> dict[str, Any]:
        if not response.is_success:
            raise HttpStatusError(response.status_code, url=url)
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PayloadError("JSON parse error", url=url) from exc
        if not isinstance(payload, dict):
            raise PayloadError(
                f"Expected a JSON object, got {type(payload).__name__}", url=url
            )
        return payload


__all__ = ["Fetcher"]
