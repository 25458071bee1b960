"""Record store for the monster vault.

The whole vault lives under one storage key:
- JsonFileBackend keeps it in a single JSON file ({"monsters": [...]}).
- MemoryBackend keeps it in process memory (tests, demos).

Every write replaces the entire collection. RecordStore performs each
operation as one read-modify-write under a lock so ids stay unique.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Protocol

from monster_vault.core.contracts import Blueprint, VaultRecord
from monster_vault.core.errors import PersistenceError, RecordNotFoundError

logger = logging.getLogger(__name__)

STORAGE_KEY = "monsters"


class VaultBackend(Protocol):
    def read(self) -> list[VaultRecord]: ...

    def write(self, records: list[VaultRecord]) -> None: ...


def _records_to_payload(records: Iterable[VaultRecord]) -> dict[str, Any]:
    return {STORAGE_KEY: [r.to_dict() for r in records]}


def _records_from_payload(data: Any) -> list[VaultRecord]:
    if data is None:
        return []
    if not isinstance(data, dict) or not isinstance(data.get(STORAGE_KEY, []), list):
        raise PersistenceError(f"stored vault must be an object with a '{STORAGE_KEY}' list")

    records: list[VaultRecord] = []
    for row in data.get(STORAGE_KEY, []):
        if not isinstance(row, dict):
            raise PersistenceError("stored vault contains a non-object record")
        try:
            records.append(VaultRecord.from_dict(row))
        except (KeyError, ValueError) as exc:
            raise PersistenceError(f"stored vault contains an invalid record: {exc}") from exc
    return records


class JsonFileBackend:
    """Persist the vault as one JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> list[VaultRecord]:
        # Missing file behaves like an empty vault.
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise PersistenceError(f"could not read vault file {self.path}: {exc}") from exc
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"vault file {self.path} is not valid JSON: {exc}") from exc
        return _records_from_payload(data)

    def write(self, records: list[VaultRecord]) -> None:
        """Write JSON atomically via temp file + replace."""
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(_records_to_payload(records), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            # TypeError/ValueError: blueprint content json cannot encode.
            tmp.unlink(missing_ok=True)
            raise PersistenceError(f"could not write vault file {self.path}: {exc}") from exc


class MemoryBackend:
    """In-process backend. Set ``fail_writes`` to simulate a full quota."""

    def __init__(self, records: Iterable[VaultRecord] | None = None) -> None:
        self._records: list[VaultRecord] = [copy.deepcopy(r) for r in (records or [])]
        self.fail_writes = False
        self.writes = 0

    def read(self) -> list[VaultRecord]:
        return copy.deepcopy(self._records)

    def write(self, records: list[VaultRecord]) -> None:
        if self.fail_writes:
            raise PersistenceError("storage quota exceeded")
        self._records = copy.deepcopy(list(records))
        self.writes += 1


def _next_id(records: Iterable[VaultRecord]) -> int:
    return max((r.id for r in records), default=0) + 1


class RecordStore:
    """Durable mapping of integer id -> blueprint, in insertion order."""

    def __init__(self, backend: VaultBackend) -> None:
        self.backend = backend
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the store lock across a read-modify-write spanning several calls."""
        with self._lock:
            yield

    def list(self) -> list[VaultRecord]:
        with self._lock:
            return self.backend.read()

    def replace_all(self, records: Iterable[VaultRecord]) -> None:
        """Atomically overwrite the whole vault.

        Raises ValueError on duplicate ids (nothing is written) and
        PersistenceError when the backend rejects the write.
        """
        new_records = list(records)
        seen: set[int] = set()
        for r in new_records:
            if r.id in seen:
                raise ValueError(f"duplicate record id: {r.id}")
            seen.add(r.id)

        with self._lock:
            self.backend.write(new_records)
        logger.debug("Vault replaced with %d record(s)", len(new_records))

    def next_id(self) -> int:
        with self._lock:
            return _next_id(self.backend.read())

    def get(self, record_id: int) -> VaultRecord:
        for r in self.list():
            if r.id == record_id:
                return r
        raise RecordNotFoundError(record_id)

    def add(self, blueprint: Blueprint) -> VaultRecord:
        with self._lock:
            records = self.backend.read()
            record = VaultRecord(id=_next_id(records), blueprint=copy.deepcopy(blueprint))
            self.replace_all([*records, record])
        return record

    def update(self, record_id: int, blueprint: Blueprint) -> VaultRecord:
        """Replace the blueprint of an existing record, keeping its position."""
        with self._lock:
            records = self.backend.read()
            for idx, r in enumerate(records):
                if r.id == record_id:
                    records[idx] = VaultRecord(id=record_id, blueprint=copy.deepcopy(blueprint))
                    self.replace_all(records)
                    return records[idx]
        raise RecordNotFoundError(record_id)

    def delete(self, record_id: int) -> None:
        with self._lock:
            records = self.backend.read()
            kept = [r for r in records if r.id != record_id]
            if len(kept) == len(records):
                raise RecordNotFoundError(record_id)
            self.replace_all(kept)
