from __future__ import annotations

import copy
import logging
from typing import Any, Sequence

from monster_vault.core.contracts import Blueprint, ImportResult, VaultRecord
from monster_vault.core.errors import UnrecognizedFormatError
from monster_vault.core.store import RecordStore

logger = logging.getLogger(__name__)


class ImportMerger:
    """Append incoming blueprints to the store as new records.

    Incoming blueprints always get fresh ids; existing records are never
    overwritten and nothing is deduplicated by content.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def import_many(self, incoming: Sequence[Any]) -> ImportResult:
        blueprints = list(incoming)
        for idx, bp in enumerate(blueprints):
            if not isinstance(bp, dict):
                raise UnrecognizedFormatError(
                    f"import entry {idx} is not a monster blueprint object ({type(bp).__name__})"
                )

        # One read and one write inside a single store transaction.
        with self.store.transaction():
            records = self.store.list()
            next_id = self.store.next_id()

            new_records: list[VaultRecord] = []
            for bp in blueprints:
                new_records.append(VaultRecord(id=next_id, blueprint=copy.deepcopy(bp)))
                next_id += 1

            self.store.replace_all([*records, *new_records])

        logger.info("Imported %d monster(s) into the vault", len(new_records))
        return ImportResult(imported_count=len(new_records), ids=[r.id for r in new_records])

    def import_one(self, incoming: Blueprint) -> ImportResult:
        return self.import_many([incoming])
