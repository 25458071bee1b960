from __future__ import annotations

import json
from pathlib import Path

import pytest

from monster_vault.core.contracts import VaultRecord
from monster_vault.core.errors import PersistenceError, RecordNotFoundError
from monster_vault.core.store import JsonFileBackend, MemoryBackend, RecordStore


def _bp(name: str) -> dict:
    return {"version": 1, "description": {"name": name}}


@pytest.fixture
def store() -> RecordStore:
    return RecordStore(MemoryBackend())


def test_empty_store_lists_nothing_and_starts_ids_at_one(store: RecordStore) -> None:
    assert store.list() == []
    assert store.next_id() == 1


def test_add_assigns_increasing_ids_and_keeps_insertion_order(store: RecordStore) -> None:
    a = store.add(_bp("A"))
    b = store.add(_bp("B"))

    assert (a.id, b.id) == (1, 2)
    assert [r.blueprint["description"]["name"] for r in store.list()] == ["A", "B"]


def test_next_id_is_distinct_from_every_existing_id() -> None:
    store = RecordStore(
        MemoryBackend([VaultRecord(id=7, blueprint=_bp("x")), VaultRecord(id=3, blueprint=_bp("y"))])
    )
    assert store.next_id() == 8

    # Insertion order is kept, not id order.
    assert [r.id for r in store.list()] == [7, 3]


def test_replace_all_rejects_duplicate_ids_without_writing(store: RecordStore) -> None:
    store.add(_bp("keep"))

    with pytest.raises(ValueError):
        store.replace_all([VaultRecord(id=1, blueprint=_bp("a")), VaultRecord(id=1, blueprint=_bp("b"))])

    assert [r.blueprint["description"]["name"] for r in store.list()] == ["keep"]


def test_failed_replace_all_leaves_prior_content_intact() -> None:
    backend = MemoryBackend()
    store = RecordStore(backend)
    store.add(_bp("A"))
    backend.fail_writes = True

    with pytest.raises(PersistenceError):
        store.replace_all([])

    assert len(store.list()) == 1


def test_update_replaces_whole_blueprint_in_place(store: RecordStore) -> None:
    store.add(_bp("A"))
    store.add(_bp("B"))

    store.update(1, _bp("A2"))

    assert [(r.id, r.blueprint["description"]["name"]) for r in store.list()] == [(1, "A2"), (2, "B")]


def test_get_and_delete_unknown_id_raise_not_found(store: RecordStore) -> None:
    store.add(_bp("A"))

    with pytest.raises(RecordNotFoundError):
        store.get(99)
    with pytest.raises(RecordNotFoundError):
        store.delete(99)
    with pytest.raises(RecordNotFoundError):
        store.update(99, _bp("Z"))


def test_delete_removes_only_the_target(store: RecordStore) -> None:
    for name in ["A", "B", "C"]:
        store.add(_bp(name))

    store.delete(2)

    assert [r.id for r in store.list()] == [1, 3]
    # Ids are not reused while a higher id exists.
    assert store.next_id() == 4


def test_stored_blueprints_are_not_aliased(store: RecordStore) -> None:
    bp = _bp("A")
    store.add(bp)
    bp["description"]["name"] = "mutated"

    listed = store.list()[0].blueprint
    listed["description"]["name"] = "also mutated"

    assert store.list()[0].blueprint["description"]["name"] == "A"


def test_json_backend_missing_file_reads_as_empty(tmp_path: Path) -> None:
    backend = JsonFileBackend(tmp_path / "nope" / "vault.json")
    assert backend.read() == []


def test_json_backend_round_trips_records_under_one_key(tmp_path: Path) -> None:
    path = tmp_path / "vault.json"
    store = RecordStore(JsonFileBackend(path))
    store.add(_bp("Gobelin"))
    store.add(_bp("Ours"))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data.keys()) == ["monsters"]
    assert [r["id"] for r in data["monsters"]] == [1, 2]

    reopened = RecordStore(JsonFileBackend(path))
    assert [r.blueprint["description"]["name"] for r in reopened.list()] == ["Gobelin", "Ours"]
    assert not path.with_suffix(".json.tmp").exists()


def test_json_backend_corrupt_file_raises_persistence_error(tmp_path: Path) -> None:
    path = tmp_path / "vault.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonFileBackend(path).read()


@pytest.mark.parametrize(
    "payload",
    [
        [1, 2],
        {"monsters": "oops"},
        {"monsters": [{"id": "1", "blueprint": {}}]},
        {"monsters": [{"id": 1}]},
    ],
)
def test_json_backend_rejects_malformed_records(tmp_path: Path, payload) -> None:  # noqa: ANN001
    path = tmp_path / "vault.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonFileBackend(path).read()


def test_json_backend_failed_write_keeps_previous_file(tmp_path: Path) -> None:
    path = tmp_path / "vault.json"
    store = RecordStore(JsonFileBackend(path))
    store.add(_bp("A"))
    before = path.read_text(encoding="utf-8")

    # A set is not JSON-encodable, so the write fails before replacing the file.
    with pytest.raises(PersistenceError):
        store.replace_all([VaultRecord(id=1, blueprint={"bad": {1, 2}})])

    assert path.read_text(encoding="utf-8") == before
    assert not path.with_suffix(".json.tmp").exists()
