from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any

Blueprint = dict[str, Any]
DerivedMonster = dict[str, Any]


@dataclass(frozen=True)
class VaultRecord:
    id: int
    blueprint: Blueprint

    def to_dict(self) -> dict[str, Any]:
        return {"id": int(self.id), "blueprint": copy.deepcopy(self.blueprint)}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "VaultRecord":
        record_id = d["id"]
        # bool is an int subclass; reject it so True never becomes id 1.
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            raise ValueError(f"record id must be an integer, got {record_id!r}")
        blueprint = d.get("blueprint")
        if not isinstance(blueprint, dict):
            raise ValueError(f"record {record_id} has no blueprint object")
        return cls(id=record_id, blueprint=copy.deepcopy(blueprint))


@dataclass(frozen=True)
class DerivedResult:
    """Outcome of a safe derivation: the monster plus how it was obtained."""

    monster: DerivedMonster
    fallback: bool = False
    error: str | None = None


@dataclass(frozen=True)
class Projection:
    record_id: int
    monster: DerivedMonster
    fallback: bool = False
    error: str | None = None


@dataclass(frozen=True)
class VaultEntry:
    record: VaultRecord
    projection: Projection

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.record.id,
            "blueprint": copy.deepcopy(self.record.blueprint),
            "monster": copy.deepcopy(self.projection.monster),
            "fallback": self.projection.fallback,
            "error": self.projection.error,
        }


@dataclass(frozen=True)
class ImportResult:
    imported_count: int
    ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
