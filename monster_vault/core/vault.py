"""Vault facade used by presentation code (CLI, HTTP API).

The record store is the only state. Every read re-derives monsters from the
stored blueprints; nothing derived is cached or persisted.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from monster_vault.core.contracts import Blueprint, ImportResult, VaultEntry, VaultRecord
from monster_vault.core.derivation import DerivationAdapter
from monster_vault.core.errors import PersistenceError, UnrecognizedFormatError
from monster_vault.core.merger import ImportMerger
from monster_vault.core.reference_pack import srd_monsters
from monster_vault.core.store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "monster_vault"


class Vault:
    def __init__(self, store: RecordStore, adapter: DerivationAdapter) -> None:
        self.store = store
        self.adapter = adapter
        self.merger = ImportMerger(store)

    # ----- read path -----

    def list_with_projections(self) -> list[VaultEntry]:
        return [self._entry(r) for r in self.store.list()]

    def get_entry(self, record_id: int) -> VaultEntry:
        return self._entry(self.store.get(record_id))

    def table(self):  # noqa: ANN201
        """Listing rows as a DataFrame (imported lazily: pandas is heavy)."""
        from monster_vault.core.table import build_listing_frame

        return build_listing_frame(self.list_with_projections())

    def _entry(self, record: VaultRecord) -> VaultEntry:
        return VaultEntry(record=record, projection=self.adapter.project(record))

    # ----- writes -----

    def add_monster(self, blueprint: Blueprint) -> VaultEntry:
        if not isinstance(blueprint, dict):
            raise UnrecognizedFormatError("monster blueprint must be a JSON object")
        return self._entry(self.store.add(blueprint))

    def update_monster(self, record_id: int, blueprint: Blueprint) -> VaultEntry:
        """Replace a monster's whole blueprint (editor save); its id and position are kept."""
        if not isinstance(blueprint, dict):
            raise UnrecognizedFormatError("monster blueprint must be a JSON object")
        return self._entry(self.store.update(record_id, blueprint))

    def delete(self, record_id: int) -> None:
        self.store.delete(record_id)
        logger.info("Deleted monster %s from the vault", record_id)

    def clear(self) -> None:
        self.store.replace_all([])
        logger.info("Vault emptied")

    # ----- import / export -----

    def import_from_pack(self, blueprints: Sequence[Blueprint] | None = None) -> ImportResult:
        pack = srd_monsters() if blueprints is None else list(blueprints)
        return self.merger.import_many(pack)

    def import_from_file(self, payload: Any) -> ImportResult:
        """Route a parsed import file.

        {"vault": [...]} imports many, {"monster": {...}} imports one; any
        other shape is rejected before the store is touched.
        """
        if isinstance(payload, dict):
            if isinstance(payload.get("vault"), list):
                return self.merger.import_many(payload["vault"])
            if isinstance(payload.get("monster"), dict):
                return self.merger.import_one(payload["monster"])
        raise UnrecognizedFormatError(
            "import file must contain a 'vault' list or a 'monster' object"
        )

    def import_from_path(self, path: str | Path) -> ImportResult:
        p = Path(path)
        try:
            payload = json.loads(p.read_text(encoding="utf-8"))
        except OSError as exc:
            raise UnrecognizedFormatError(f"could not read import file {p}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise UnrecognizedFormatError(f"{p} is not a JSON file: {exc}") from exc
        return self.import_from_file(payload)

    def export_all(self) -> dict[str, list[Blueprint]]:
        return {"vault": [copy.deepcopy(r.blueprint) for r in self.store.list()]}

    def export_to_path(self, path: str | Path | None = None) -> Path:
        p = Path(path) if path is not None else Path(f"{DEFAULT_EXPORT_NAME}.json")
        if p.is_dir():
            p = p / f"{DEFAULT_EXPORT_NAME}.json"
        payload = json.dumps(self.export_all(), indent=2, ensure_ascii=False)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"could not write export file {p}: {exc}") from exc
        return p
