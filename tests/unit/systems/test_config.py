"""Tests for tuning tables and the YAML loader."""

import pytest
from pydantic import ValidationError

from skyward.config import GameConfig, load_config
from skyward.models.expedition import Radius
from skyward.models.infrastructure import InfraCategory


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("SKYWARD_CONFIG", raising=False)
    monkeypatch.delenv("SKYWARD_SEED", raising=False)


class TestDefaults:
    def test_starting_values(self):
        config = GameConfig()
        assert config.starting.food == 9
        assert config.starting.settlers == 3
        assert config.expedition.recover_time[Radius.SMALL] == 1
        assert config.consumption.hunger_effects.day3_plus == 15

    def test_frozen(self):
        config = GameConfig()
        with pytest.raises(ValidationError):
            config.seed = 5


class TestLoadConfig:
    def test_no_file_gives_defaults(self):
        assert load_config().model_dump() == GameConfig().model_dump()

    def test_yaml_overrides_merge(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text(
            "seed: 42\n"
            "starting:\n"
            "  food: 20\n"
            "expedition:\n"
            "  duration:\n"
            "    small: {min: 4, max: 4}\n"
        )
        config = load_config(path)
        assert config.seed == 42
        assert config.starting.food == 20
        assert config.starting.water == 9
        assert config.expedition.duration[Radius.SMALL].max == 4
        assert config.expedition.duration[Radius.LARGE].min == 5
        assert config.infrastructure.categories[InfraCategory.FOOD][0].name == "Basic Garden"
        assert config.infrastructure.mechanic_speed_bonus[2] == 1.6

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_seed_from_environment(self, monkeypatch):
        monkeypatch.setenv("SKYWARD_SEED", "7")
        assert load_config().seed == 7

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("tasks:\n  heal_amount: 25\n")
        monkeypatch.setenv("SKYWARD_CONFIG", str(path))
        assert load_config().tasks.heal_amount == 25
