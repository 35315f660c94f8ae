"""Pydantic models used across catalog-sniper configuration flow."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

CATALOG_SEARCH_URL = "https://catalog.roproxy.com/v1/search/items/details"


class FetchSettings(BaseModel):
    """Request, retry and pacing parameters shared by every source."""

    timeout: float = 30.0
    max_attempts: int = 3
    retry_base_delay: float = 2.0
    page_delay: float = 1.0
    cursor_param: str = "Cursor"
    user_agent: str = "catalog-sniper/0.1"

    @model_validator(mode="after")
    def _validate_bounds(self) -> "FetchSettings":
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.retry_base_delay < 0:
            raise ValueError("retry_base_delay must be >= 0")
        if self.page_delay < 0:
            raise ValueError("page_delay must be >= 0")
        if not self.cursor_param.strip():
            raise ValueError("cursor_param cannot be empty")
        return self


class ApiSourceConfig(BaseModel):
    """One paginated search endpoint feeding a target document."""

    name: str
    url: str
    params: dict[str, str | int] = Field(default_factory=dict)
    output_file: str
    enabled: bool = True

    @field_validator("name", "url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("value cannot be empty")
        return value

    @field_validator("output_file")
    @classmethod
    def _validate_output_file(cls, value: str) -> str:
        value = value.strip()
        path = PurePosixPath(value.replace("\\", "/"))
        if not value or path.is_absolute() or ".." in path.parts:
            raise ValueError(f"output_file must be a relative path inside outputs_dir: {value!r}")
        if path.suffix != ".json":
            raise ValueError("output_file must end with .json")
        return path.as_posix()


def _default_sources() -> list[ApiSourceConfig]:
    return [
        ApiSourceConfig(
            name="Basic API",
            url=CATALOG_SEARCH_URL,
            params={"Category": 12, "Subcategory": 39, "Limit": 30},
            output_file="emotedata.json",
        ),
        ApiSourceConfig(
            name="Latest API",
            url=CATALOG_SEARCH_URL,
            params={
                "Category": 12,
                "Subcategory": 39,
                "Limit": 30,
                "salesTypeFilter": 1,
                "SortType": 3,
            },
            output_file="emotedata.json",
        ),
        ApiSourceConfig(
            name="Animation API",
            url=CATALOG_SEARCH_URL,
            params={"Category": 12, "Subcategory": 38, "salesTypeFilter": 1, "Limit": 30},
            output_file="animationdata.json",
        ),
    ]


class GlobalConfig(BaseModel):
    """Top-level configuration: fetch behaviour, output location and sources."""

    fetch: FetchSettings = Field(default_factory=FetchSettings)
    outputs_dir: Path = Field(default=Path("data/outputs"))
    sources: list[ApiSourceConfig] = Field(default_factory=_default_sources)

    @field_validator("outputs_dir", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path:
        return Path(value)

    @model_validator(mode="after")
    def _unique_source_names(self) -> "GlobalConfig":
        seen: set[str] = set()
        for source in self.sources:
            if source.name in seen:
                raise ValueError(f"Duplicate source name: {source.name}")
            seen.add(source.name)
        return self

    def enabled_sources(self) -> list[ApiSourceConfig]:
        return [source for source in self.sources if source.enabled]


__all__ = [
    "ApiSourceConfig",
    "CATALOG_SEARCH_URL",
    "FetchSettings",
    "GlobalConfig",
]
