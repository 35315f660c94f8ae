"""Map raw catalog items into the persisted record shape."""

from __future__ import annotations

from typing import Any, Mapping

EXCLUDED_BUNDLE_TYPE = "UserOutfit"


def item_id(raw_item: Any) -> str | int | None:
    """Return the dedup identifier of a raw item, or ``None`` if it has none.

    Only string and integer ids are usable; anything else counts as missing.
    """

    if not isinstance(raw_item, Mapping):
        return None
    value = raw_item.get("id")
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    return value


def group_bundled_items(bundled: Any) -> dict[str, list[Any]]:
    """Group retained sub-item ids under 1-based positional keys.

    A sub-item is retained when it is not an outfit and carries an id. The
    position counter only advances on retained sub-items, so keys are always
    contiguous ("1", "2", ...).
    """

    grouped: dict[str, list[Any]] = {}
    if not isinstance(bundled, list):
        return grouped
    counter = 1
    for entry in bundled:
        if not isinstance(entry, Mapping):
            continue
        if entry.get("type") == EXCLUDED_BUNDLE_TYPE or not entry.get("id"):
            continue
        grouped.setdefault(str(counter), []).append(entry["id"])
        counter += 1
    return grouped


def transform_item(raw_item: Mapping[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = {"id": raw_item.get("id"), "name": raw_item.get("name")}
    bundled = group_bundled_items(raw_item.get("bundledItems"))
    if bundled:
        record["bundledItems"] = bundled
    return record


__all__ = ["EXCLUDED_BUNDLE_TYPE", "group_bundled_items", "item_id", "transform_item"]
