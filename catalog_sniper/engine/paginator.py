"""Cursor pagination over catalog search endpoints."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol

import httpx
import structlog

from ..config import ApiSourceConfig, FetchSettings
from ..errors import FetchError
from .dedup import DeduplicationIndex
from .transformer import item_id, transform_item


class JsonFetcher(Protocol):
    def fetch_json(self, url: str, max_attempts: int | None = None) -> dict[str, Any]:
        ...


@dataclass(slots=True)
class CatalogPage:
    """One decoded page of upstream results."""

    number: int
    url: str
    items: list[Any]
    next_cursor: str | None


@dataclass(slots=True)
class PaginationResult:
    """Records gathered from one source plus new/duplicate counters."""

    source_name: str
    records: list[dict[str, Any]] = field(default_factory=list)
    new_count: int = 0
    duplicate_count: int = 0
    pages: int = 0
    error: FetchError | None = None

    @property
    def completed(self) -> bool:
        return self.error is None


def build_page_url(source: ApiSourceConfig, cursor: str | None, cursor_param: str = "Cursor") -> str:
    url = httpx.URL(source.url)
    if source.params:
        url = url.copy_merge_params({key: str(value) for key, value in source.params.items()})
    if cursor:
        url = url.copy_set_param(cursor_param, cursor)
    return str(url)


def _normalise_cursor(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


class Paginator:
    """Walk a source's cursor chain and fold pages into a dedup-aware result."""

    def __init__(
        self,
        fetcher: JsonFetcher,
        settings: FetchSettings | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.settings = settings or FetchSettings()
        self.logger = logger or structlog.get_logger("catalog_sniper.paginator")

    def iter_pages(self, source: ApiSourceConfig) -> Iterator[CatalogPage]:
        """Yield pages lazily until upstream stops returning a cursor."""

        cursor: str | None = None
        number = 0
        while True:
            if number:
                time.sleep(self.settings.page_delay)
            number += 1
            url = build_page_url(source, cursor, self.settings.cursor_param)
            self.logger.info("page_fetch", source=source.name, page=number)
            payload = self.fetcher.fetch_json(url, self.settings.max_attempts)
            items = payload.get("data")
            if not isinstance(items, list):
                items = []
            cursor = _normalise_cursor(payload.get("nextPageCursor"))
            yield CatalogPage(number=number, url=url, items=items, next_cursor=cursor)
            if cursor is None:
                return

    def paginate(self, source: ApiSourceConfig, dedup_index: DeduplicationIndex) -> PaginationResult:
        result = PaginationResult(source_name=source.name)
        try:
            for page in self.iter_pages(source):
                result.pages += 1
                for raw_item in page.items:
                    identifier = item_id(raw_item)
                    if identifier is None:
                        self.logger.warning("item_without_id", source=source.name, page=page.number)
                        continue
                    if dedup_index.check_and_store(identifier):
                        result.duplicate_count += 1
                        continue
                    result.records.append(transform_item(raw_item))
                    result.new_count += 1
        except FetchError as exc:
            result.error = exc
            self.logger.error(
                "pagination_aborted",
                source=source.name,
                pages=result.pages,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        return result


__all__ = ["CatalogPage", "PaginationResult", "Paginator", "build_page_url"]
