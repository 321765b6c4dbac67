"""Searchee source adapter.

Maps the JSON snapshot written by the torrent client integration into core
Searchee models. Accepts both ``info_hash`` and the camelCase ``infoHash``
key, and file entries that are either objects or bare names.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Union

from core.models import Searchee, SearcheeFile


class SearcheeLoadError(ValueError):
    """Raised when a searchee record cannot be mapped."""


def _map_file(raw: Any, index: int) -> SearcheeFile:
    if isinstance(raw, str):
        return SearcheeFile(name=raw)
    if isinstance(raw, dict) and isinstance(raw.get("name"), str):
        return SearcheeFile(name=raw["name"], length=int(raw.get("length") or 0))
    raise SearcheeLoadError(f"searchee #{index}: file entries need a string name")


def map_searchee(raw: Any, index: int = 0) -> Searchee:
    """Build a Searchee from one decoded JSON record."""

    if not isinstance(raw, dict):
        raise SearcheeLoadError(f"searchee #{index}: expected an object, got {type(raw).__name__}")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise SearcheeLoadError(f"searchee #{index}: name is required")

    info_hash = raw.get("info_hash", raw.get("infoHash")) or None
    if info_hash is not None and not isinstance(info_hash, str):
        raise SearcheeLoadError(f"searchee #{index}: info hash must be a string")

    raw_files = raw.get("files") or []
    if not isinstance(raw_files, list):
        raise SearcheeLoadError(f"searchee #{index}: files must be a list")

    return Searchee(
        name=name,
        files=tuple(_map_file(entry, index) for entry in raw_files),
        info_hash=info_hash.lower() if info_hash else None,
    )


def load_searchees(path: Union[str, Path]) -> List[Searchee]:
    """Read a JSON list of searchee records from disk, keeping file order."""

    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SearcheeLoadError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(data, list):
        raise SearcheeLoadError(f"{path}: expected a JSON list of searchees")
    return [map_searchee(entry, index) for index, entry in enumerate(data)]
