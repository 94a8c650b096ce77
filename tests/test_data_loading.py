import json
import logging
from pathlib import Path

import pytest

from fishloot.data.errors import (
    CyclicGroupError,
    DataLoadError,
    DataValidationError,
    DuplicateLootError,
)
from fishloot.data.repositories import LootConditionsRepository, LootRepository
from fishloot.domain.context import LootContext
from fishloot.domain.defs import LootType
from fishloot.domain.requirements import ArgEqualsRequirement, ConstantRequirement
from fishloot.domain.targets import CombinationTarget, LootTarget
from fishloot.domain.weights import ConstantWeight, ExpressionWeight

_LOOTS = {
    "fish_a": {"groups": ["ocean", "no_star"], "nick": "Fish A", "score": 5},
    "fish_b": {"type": "entity", "groups": "ocean"},
}


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir


def _conditions_repo(sections: object, **kwargs) -> LootConditionsRepository:
    return LootConditionsRepository(loot_repo=LootRepository(sections=_LOOTS), sections=sections, **kwargs)


def test_loot_repo_loads_file_in_configuration_order(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "loots.json",
        {
            "zander": {
                "type": "item",
                "groups": ["river", "no_star"],
                "lore": ["Caught at dusk."],
                "score": 12.5,
                "instant-game": True,
                "show-in-finder": False,
                "custom-data": {"rarity": "common", "size": 3},
                "material": "cod",
            },
            "anchovy": {"groups": "ocean"},
        },
    )
    repo = LootRepository(base_path=definitions_dir)
    loots = repo.all()

    assert [loot.id for loot in loots] == ["zander", "anchovy"]
    zander = repo.get("zander")
    assert zander.type is LootType.ITEM
    assert zander.groups == ("river", "no_star")
    assert zander.lore == ("Caught at dusk.",)
    assert zander.score == 12.5
    assert zander.instant_game is True
    assert zander.show_in_finder is False
    assert zander.disable_game is False
    assert zander.custom_data == {"rarity": "common", "size": "3"}
    anchovy = repo.get("anchovy")
    assert anchovy.groups == ("ocean",)
    assert anchovy.nick == "anchovy"
    assert anchovy.display_name == "anchovy"


def test_loot_repo_reads_a_directory_of_section_files(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    loots_dir = definitions_dir / "loots"
    loots_dir.mkdir()
    _write_json(loots_dir / "b_river.json", {"salmon": {"groups": ["river"]}})
    _write_json(loots_dir / "a_ocean.json", {"tuna": {"groups": ["ocean"]}})

    repo = LootRepository(base_path=definitions_dir)

    assert [loot.id for loot in repo.all()] == ["tuna", "salmon"]


def test_loot_repo_duplicate_ids_are_fatal() -> None:
    repo = LootRepository(sections=[{"tuna": {}}, {"tuna": {"groups": ["ocean"]}}])
    with pytest.raises(DuplicateLootError):
        repo.all()


def test_loot_repo_get_missing_raises() -> None:
    repo = LootRepository(sections=_LOOTS)
    with pytest.raises(KeyError):
        repo.get("missing_fish")
    assert "fish_a" in repo
    assert "missing_fish" not in repo


def test_loot_repo_missing_file_raises(tmp_path: Path) -> None:
    repo = LootRepository(base_path=_make_definitions_dir(tmp_path))
    with pytest.raises(DataLoadError):
        repo.all()


@pytest.mark.parametrize(
    "entry",
    [
        {"type": "treasure"},
        {"score": "high"},
        {"groups": [1, 2]},
        {"instant-game": "yes"},
        {"custom-data": ["a"]},
    ],
)
def test_loot_repo_rejects_wrong_types(entry: dict) -> None:
    repo = LootRepository(sections={"bad": entry})
    with pytest.raises(DataValidationError):
        repo.all()


def test_loot_repo_type_is_case_insensitive() -> None:
    repo = LootRepository(sections=_LOOTS)
    assert repo.get("fish_b").type is LootType.ENTITY


def test_loot_repo_refresh_rebuilds_from_new_sections() -> None:
    repo = LootRepository(sections=_LOOTS)
    assert len(repo.all()) == 2

    repo.refresh({"only": {}})

    assert [loot.id for loot in repo.all()] == ["only"]


def test_conditions_repo_builds_nested_groups(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "loots.json", _LOOTS)
    _write_json(
        definitions_dir / "loot_conditions.json",
        {
            "global": {
                "list": ["fish_a:+10", {"target": "fish_b", "weight": 2}],
                "sub-groups": {
                    "ocean": {
                        "conditions": [{"type": "equals", "arg": "environment", "value": "ocean"}],
                        "list": ["group_for_each:ocean&no_star:{{group_no_star&ocean}} * 0.5"],
                    }
                },
            }
        },
    )
    loot_repo = LootRepository(base_path=definitions_dir)
    repo = LootConditionsRepository(loot_repo=loot_repo, base_path=definitions_dir)

    root = repo.get("global")
    assert [rule.target for rule in root.element] == [LootTarget("fish_a"), LootTarget("fish_b")]
    assert [rule.operation for rule in root.element] == [ConstantWeight(10.0), ConstantWeight(2.0)]
    ocean = root.children["ocean"]
    assert ocean.requirements == (ArgEqualsRequirement("environment", "ocean"),)
    assert ocean.element[0].target == CombinationTarget(("no_star", "ocean"))
    assert ocean.element[0].operation == ExpressionWeight("{{group_no_star&ocean}} * 0.5")
    assert ocean.is_satisfied(LootContext(args={"environment": "ocean"}))


def test_conditions_repo_skips_unknown_targets(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    repo = _conditions_repo({"common": {"list": ["fish_a:5", "ghost_fish:5", "a&&b:3", ":4", "fish_b:1"]}})

    common = repo.get("common")

    assert [rule.target for rule in common.element] == [LootTarget("fish_a"), LootTarget("fish_b")]
    assert "ghost_fish" in caplog.text
    assert "common.list[2]" in caplog.text


@pytest.mark.parametrize(
    "section",
    [
        {"list": ["fish_a"]},
        {"list": ["fish_a:"]},
        {"list": [5]},
        {"list": "fish_a:5"},
        {"weights": []},
        {"conditions": [{"type": "equals", "value": "ocean"}]},
        {"conditions": [{"type": "range", "arg": "time", "min": 10, "max": 1}]},
        {"sub-groups": ["child"]},
    ],
)
def test_conditions_repo_rejects_malformed_sections(section: dict) -> None:
    repo = _conditions_repo({"broken": section})
    with pytest.raises(DataValidationError):
        repo.all()


def test_conditions_repo_cycles_are_fatal() -> None:
    node: dict = {"list": ["fish_a:1"]}
    node["sub-groups"] = {"again": node}
    repo = _conditions_repo({"loop": node})

    with pytest.raises(CyclicGroupError):
        repo.all()


def test_unknown_requirement_type_closes_the_group(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    repo = _conditions_repo({"odd": {"conditions": [{"type": "moon-phase"}], "list": ["fish_a:1"]}})

    odd = repo.get("odd")

    assert odd.requirements == (ConstantRequirement(False),)
    assert "moon-phase" in caplog.text


def test_custom_requirement_factories_are_used() -> None:
    factories = {"biome": lambda params, context: ArgEqualsRequirement("biome", params["value"])}
    repo = _conditions_repo(
        {"jungle": {"conditions": [{"type": "biome", "value": "jungle"}], "list": ["fish_a:1"]}},
        requirement_factories=factories,
    )

    jungle = repo.get("jungle")

    assert jungle.is_satisfied(LootContext(args={"biome": "jungle"}))
    assert not jungle.is_satisfied(LootContext(args={"biome": "desert"}))
