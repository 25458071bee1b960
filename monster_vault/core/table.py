"""Listing rows for tabular display of the vault."""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from monster_vault.core.contracts import VaultEntry
from monster_vault.core.engine import NO_VALUE

LISTING_COLUMNS = [
    "id",
    "name",
    "description",
    "role_rank",
    "ac",
    "hp",
    "level",
    "role",
    "rank",
    "fallback",
]


def sort_value(value: Any) -> float:
    """Numeric value used to sort level-like columns ("—" sorts as 0)."""
    if value is None or value == NO_VALUE:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def format_description(size: str, type_: str, tags: str, alignment: str) -> str:
    """E.g. "small humanoid (goblinoid), neutral evil"."""
    head = " ".join(p for p in [size, type_] if p)
    if tags:
        head = f"{head} ({tags})" if head else f"({tags})"
    if alignment:
        return f"{head}, {alignment}" if head else alignment
    return head


def format_role_rank(monster: dict[str, Any]) -> str:
    if monster.get("method") == "manual":
        return NO_VALUE
    desc = monster.get("description", {})
    out = f"{desc.get('role')} {desc.get('rank')}"
    if desc.get("rank") == "solo":
        out += f" vs {desc.get('players')}"
    return out


def listing_row(entry: VaultEntry) -> dict[str, Any]:
    monster = entry.projection.monster
    desc = monster.get("description", {})
    rank = desc.get("rank")
    if rank == "solo":
        rank = f"solo vs {desc.get('players')}"
    return {
        "id": entry.record.id,
        "name": desc.get("name"),
        "description": format_description(
            desc.get("size", ""), desc.get("type", ""), monster.get("tags", ""), desc.get("alignment", "")
        ),
        "role_rank": format_role_rank(monster),
        "ac": monster.get("ac", {}).get("value"),
        "hp": monster.get("hp", {}).get("average"),
        "level": sort_value(desc.get("level")),
        "role": desc.get("role"),
        "rank": rank,
        "fallback": entry.projection.fallback,
    }


def build_listing_frame(entries: Iterable[VaultEntry]) -> pd.DataFrame:
    """One row per record, ordered by id ascending."""
    rows = [listing_row(e) for e in entries]
    df = pd.DataFrame(rows, columns=LISTING_COLUMNS)
    if df.empty:
        return df
    return df.sort_values("id", kind="stable").reset_index(drop=True)
