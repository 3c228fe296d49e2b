"""Parameter loading."""

import json

import pytest

from platinum_rift.config import DEFAULT_PARAMS, EngineConfig, load_params
from platinum_rift.errors import ConfigError


def test_defaults():
    config = EngineConfig.from_params()
    assert config.move_policy == "resource_first"
    assert config.spawn_policy == "random"
    assert config.spawn_cost == 20
    assert config.seed is None


def test_overrides_are_case_insensitive():
    config = EngineConfig.from_params({"spawn_policy": "balanced", "SEED": 7})
    assert config.spawn_policy == "balanced"
    assert config.seed == 7


@pytest.mark.parametrize("params", [
    {"NOT_A_KNOB": 1},
    {"MOVE_POLICY": "teleport"},
    {"SPAWN_POLICY": "nowhere"},
    {"SPAWN_COST": 0},
])
def test_bad_params(params):
    with pytest.raises(ConfigError):
        EngineConfig.from_params(params)


def test_load_params_sources(tmp_path):
    assert load_params(None, None) == {}
    assert load_params('{"SEED": 3}', None) == {"SEED": 3}

    path = tmp_path / "params.json"
    path.write_text(json.dumps({"SPLIT_STACKS": True}), encoding="utf-8")
    assert load_params(None, str(path)) == {"SPLIT_STACKS": True}

    with pytest.raises(ConfigError):
        load_params('{"SEED": 3}', str(path))
    with pytest.raises(ConfigError):
        load_params("[1, 2]", None)
    with pytest.raises(ConfigError):
        load_params("{nope", None)
    with pytest.raises(ConfigError):
        load_params(None, str(tmp_path / "missing.json"))


def test_every_default_maps_to_a_field():
    config = EngineConfig.from_params(dict(DEFAULT_PARAMS))
    assert config == EngineConfig()
