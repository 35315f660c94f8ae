"""Persisted catalog document schema and JSON codec."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import StorageReadError


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format ``moment`` as ``2024-05-20T12:00:00.000Z``."""

    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CatalogDocument(BaseModel):
    """One output target: reserved keyword, counters and the ordered records."""

    model_config = ConfigDict(populate_by_name=True)

    keyword: None = None
    total_items: int = Field(default=0, alias="totalItems")
    last_update: str | None = Field(default=None, alias="lastUpdate")
    data: list[dict[str, Any]] = Field(default_factory=list)

    def append(self, records: list[dict[str, Any]]) -> None:
        self.data.extend(records)

    def stamp(self, moment: datetime | None = None) -> None:
        self.total_items = len(self.data)
        self.last_update = utc_timestamp(moment)

    def to_bytes(self) -> bytes:
        payload = self.model_dump(mode="json", by_alias=True)
        return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes, key: str | None = None) -> "CatalogDocument":
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageReadError(f"Document is not valid JSON: {exc}", key=key) from exc
        if not isinstance(payload, dict):
            raise StorageReadError("Document root must be an object", key=key)
        # keyword is reserved; older files may carry any value there
        payload.pop("keyword", None)
        # counters are recomputed on every save, so unusable values are dropped
        total = payload.get("totalItems")
        if isinstance(total, bool) or not isinstance(total, int):
            payload.pop("totalItems", None)
        if not isinstance(payload.get("lastUpdate"), str):
            payload.pop("lastUpdate", None)
        if payload.get("data") is None:
            payload["data"] = []
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise StorageReadError(f"Document has invalid structure: {exc}", key=key) from exc


__all__ = ["CatalogDocument", "utc_timestamp"]
