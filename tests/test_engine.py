from __future__ import annotations

import pytest

from monster_vault.core.engine import NO_VALUE, MonsterEngine, default_blueprint
from monster_vault.core.errors import DerivationError


@pytest.fixture
def engine() -> MonsterEngine:
    return MonsterEngine()


def test_default_blueprint_derives(engine: MonsterEngine) -> None:
    monster = engine.create_projection(default_blueprint())

    assert monster["method"] == "quickstart"
    assert monster["description"]["name"] == "Nouveau monstre"
    assert monster["description"]["level"] == 1
    # striker: AC 13 + 0 - 1, HP (8 + 12) * 1.0 * 1.0
    assert monster["ac"]["value"] == 12
    assert monster["hp"]["average"] == 20


def test_quickstart_scales_with_rank_and_role(engine: MonsterEngine) -> None:
    def derive(**desc):  # noqa: ANN003, ANN202
        bp = default_blueprint()
        bp["description"].update(desc)
        return engine.create_projection(bp)

    grunt = derive(level=4, role="defender", rank="grunt")
    elite = derive(level=4, role="defender", rank="elite")
    minion = derive(level=4, role="defender", rank="minion")

    assert grunt["ac"]["value"] == 16
    assert elite["hp"]["average"] == 2 * grunt["hp"]["average"]
    assert minion["hp"]["average"] < grunt["hp"]["average"]


def test_solo_hp_scales_with_players(engine: MonsterEngine) -> None:
    bp = default_blueprint()
    bp["description"].update(level=10, rank="solo", players=5)
    solo = engine.create_projection(bp)

    bp["description"].update(rank="grunt")
    grunt = engine.create_projection(bp)

    assert solo["description"]["players"] == 5
    assert solo["hp"]["average"] == 5 * grunt["hp"]["average"]


def test_manual_method_uses_typed_values(engine: MonsterEngine) -> None:
    bp = {
        "version": 1,
        "method": "manual",
        "description": {"name": "Zombie", "type": "undead"},
        "manual": {"ac": 8, "hp": 22},
    }
    monster = engine.create_projection(bp)

    assert monster["ac"]["value"] == 8
    assert monster["hp"]["average"] == 22
    assert monster["description"]["level"] == NO_VALUE
    assert monster["description"]["type"] == "undead"


def test_engine_does_not_mutate_blueprint(engine: MonsterEngine) -> None:
    bp = {"description": {"name": "Gobelin"}}
    engine.create_projection(bp)
    assert bp == {"description": {"name": "Gobelin"}}


@pytest.mark.parametrize(
    "blueprint",
    [
        "not a blueprint",
        {"version": 99},
        {"method": "random"},
        {"description": {"name": ""}},
        {"description": {"name": "X", "level": "high"}},
        {"description": {"name": "X", "level": 99}},
        {"description": {"name": "X", "role": "tank"}},
        {"description": {"name": "X", "rank": "boss"}},
        {"method": "manual", "manual": {"ac": 10}},
        {"tags": ["a", "b"]},
    ],
)
def test_invalid_blueprints_raise_derivation_error(engine: MonsterEngine, blueprint) -> None:  # noqa: ANN001
    with pytest.raises(DerivationError):
        engine.create_projection(blueprint)
