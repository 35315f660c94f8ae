"""Pytest configuration providing shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from catalog_sniper.config import (
    ApiSourceConfig,
    ConfigLocator,
    ConfigRepository,
    FetchSettings,
    GlobalConfig,
)
from catalog_sniper.infra import FileBlobStore


class ScriptedFetcher:
    """Stand-in fetcher replaying payloads (or raising errors) in call order."""

    def __init__(self, responses: Iterable[Any]) -> None:
        self.responses = list(responses)
        self.urls: list[str] = []

    def fetch_json(self, url: str, max_attempts: int | None = None) -> dict[str, Any]:
        self.urls.append(url)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        return


def page(ids: Iterable[Any], cursor: str | None = None, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "data": [{"id": item_id, "name": f"Item {item_id}", **extra} for item_id in ids],
        "nextPageCursor": cursor,
    }
    return payload


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("CATALOG_SNIPER_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    delays: list[float] = []
    monkeypatch.setattr("catalog_sniper.engine.paginator.time.sleep", delays.append)
    return delays


@pytest.fixture
def fast_settings() -> FetchSettings:
    return FetchSettings(timeout=5, max_attempts=3, retry_base_delay=0.5, page_delay=1.0)


@pytest.fixture
def sample_source_config() -> Callable[..., ApiSourceConfig]:
    def _builder(**overrides: Any) -> ApiSourceConfig:
        base: dict[str, Any] = {
            "name": "Example API",
            "url": "https://catalog.example.com/v1/search/items/details",
            "params": {"Category": 12, "Limit": 30},
            "output_file": "example.json",
        }
        base.update(overrides)
        return ApiSourceConfig(**base)

    return _builder


@pytest.fixture
def sample_global_config(tmp_path: Path, sample_source_config, fast_settings) -> GlobalConfig:
    return GlobalConfig(
        fetch=fast_settings,
        outputs_dir=tmp_path / "outputs",
        sources=[
            sample_source_config(name="First", output_file="one.json"),
            sample_source_config(name="Second", output_file="one.json", params={"Category": 13}),
            sample_source_config(name="Third", output_file="two.json"),
        ],
    )


@pytest.fixture
def temp_config_repository(tmp_path: Path) -> ConfigRepository:
    locator = ConfigLocator(project_root=tmp_path)
    return ConfigRepository(locator)


@pytest.fixture
def blob_store(tmp_path: Path) -> FileBlobStore:
    return FileBlobStore(tmp_path / "outputs")


@pytest.fixture
def scripted_fetcher() -> Callable[..., ScriptedFetcher]:
    return ScriptedFetcher


@pytest.fixture
def make_page() -> Callable[..., dict[str, Any]]:
    return page
