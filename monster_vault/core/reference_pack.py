"""Bundled SRD reference pack offered for bulk import."""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from pathlib import Path

from monster_vault.core.contracts import Blueprint


def default_pack_path() -> Path:
    # monster_vault/core/reference_pack.py -> monster_vault/data
    return Path(__file__).resolve().parents[1] / "data" / "srd_monsters.json"


@lru_cache(maxsize=4)
def _load(path: Path) -> tuple[Blueprint, ...]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(x, dict) for x in data):
        raise ValueError(f"reference pack {path} must be a JSON list of blueprint objects")
    return tuple(data)


def srd_monsters(path: Path | None = None) -> list[Blueprint]:
    """Return a fresh copy of the reference blueprints (callers may mutate it)."""
    return copy.deepcopy(list(_load(path or default_pack_path())))
