"""Default derivation engine: blueprint -> display-ready monster.

A blueprint is a plain JSON object. Two authoring methods are supported:
- "quickstart": AC and HP are computed from level, role and rank.
- "manual": AC and HP are typed in by the author under "manual".

Anything the engine does not understand raises DerivationError; the vault's
derivation adapter is responsible for falling back to the default blueprint.
"""

from __future__ import annotations

from typing import Any

from monster_vault.core.contracts import Blueprint, DerivedMonster
from monster_vault.core.errors import DerivationError

BLUEPRINT_VERSION = 1
SUPPORTED_VERSIONS = frozenset({BLUEPRINT_VERSION})

NO_VALUE = "—"

MIN_LEVEL = 0
MAX_LEVEL = 30

DEFAULT_PLAYERS = 4

# AC offset and HP multiplier per role.
ROLES: dict[str, tuple[int, float]] = {
    "controller": (0, 1.0),
    "defender": (2, 1.2),
    "lurker": (-1, 0.8),
    "scout": (-1, 0.9),
    "sniper": (0, 0.8),
    "striker": (-1, 1.0),
    "supporter": (0, 0.9),
}

# HP multiplier per rank; solo monsters scale with the number of players.
RANKS: dict[str, float] = {
    "minion": 0.2,
    "grunt": 1.0,
    "elite": 2.0,
    "solo": 1.0,
}

METHODS = ("quickstart", "manual")


def default_blueprint() -> Blueprint:
    """Blueprint used for new monsters and as the derivation fallback."""
    return {
        "version": BLUEPRINT_VERSION,
        "method": "quickstart",
        "description": {
            "name": "Nouveau monstre",
            "level": 1,
            "role": "striker",
            "rank": "grunt",
            "players": DEFAULT_PLAYERS,
            "size": "medium",
            "type": "humanoid",
            "alignment": "unaligned",
        },
        "tags": "",
        "manual": {"ac": 12, "hp": 10},
    }


def _require_int(value: Any, what: str, *, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DerivationError(f"{what} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise DerivationError(f"{what} must be between {low} and {high}, got {value}")
    return value


def _description(blueprint: Blueprint) -> dict[str, Any]:
    desc = blueprint.get("description", {})
    if not isinstance(desc, dict):
        raise DerivationError("blueprint description must be an object")
    base = default_blueprint()["description"]
    merged = {**base, **desc}
    name = merged.get("name")
    if not isinstance(name, str) or not name.strip():
        raise DerivationError("monster name must be a non-empty string")
    return merged


def _quickstart(desc: dict[str, Any]) -> tuple[dict[str, Any], int, int]:
    level = _require_int(desc.get("level"), "level", low=MIN_LEVEL, high=MAX_LEVEL)

    role = desc.get("role")
    if role not in ROLES:
        raise DerivationError(f"unknown role: {role!r}")
    rank = desc.get("rank")
    if rank not in RANKS:
        raise DerivationError(f"unknown rank: {rank!r}")

    players = DEFAULT_PLAYERS
    if rank == "solo":
        players = _require_int(desc.get("players"), "players", low=1, high=10)

    ac_offset, hp_mult = ROLES[role]
    ac = 13 + level // 4 + ac_offset

    rank_mult = players if rank == "solo" else RANKS[rank]
    hp = max(1, round((8 + level * 12) * hp_mult * rank_mult))

    shown = {
        "level": level,
        "role": role,
        "rank": rank,
        "players": players,
    }
    return shown, ac, hp


def _manual(blueprint: Blueprint) -> tuple[dict[str, Any], int, int]:
    manual = blueprint.get("manual")
    if not isinstance(manual, dict):
        raise DerivationError("manual blueprint requires a 'manual' object")
    ac = _require_int(manual.get("ac"), "manual AC", low=0, high=50)
    hp = _require_int(manual.get("hp"), "manual HP", low=1, high=100_000)
    shown = {
        "level": NO_VALUE,
        "role": NO_VALUE,
        "rank": NO_VALUE,
        "players": None,
    }
    return shown, ac, hp


class MonsterEngine:
    """Turns blueprints into the statblock summary shown in the vault."""

    def default_blueprint(self) -> Blueprint:
        return default_blueprint()

    def create_projection(self, blueprint: Blueprint) -> DerivedMonster:
        if not isinstance(blueprint, dict):
            raise DerivationError(f"blueprint must be an object, got {type(blueprint).__name__}")

        version = blueprint.get("version", BLUEPRINT_VERSION)
        if version not in SUPPORTED_VERSIONS:
            raise DerivationError(f"unsupported blueprint version: {version!r}")

        method = blueprint.get("method", "quickstart")
        if method not in METHODS:
            raise DerivationError(f"unknown method: {method!r}")

        desc = _description(blueprint)
        if method == "manual":
            shown, ac, hp = _manual(blueprint)
        else:
            shown, ac, hp = _quickstart(desc)

        tags = blueprint.get("tags", "")
        if not isinstance(tags, str):
            raise DerivationError("tags must be a string")

        return {
            "method": method,
            "description": {
                "name": desc["name"].strip(),
                "size": str(desc.get("size") or ""),
                "type": str(desc.get("type") or ""),
                "alignment": str(desc.get("alignment") or ""),
                **shown,
            },
            "tags": tags,
            "ac": {"value": ac},
            "hp": {"average": hp},
        }

    def create_default(self) -> DerivedMonster:
        return self.create_projection(self.default_blueprint())
