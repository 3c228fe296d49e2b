"""
Engine parameters.

DEFAULT_PARAMS holds every tunable knob. A bot run may override any subset
with an inline JSON object (--params) or a JSON file (--params-file); the
merged result is frozen into an EngineConfig.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platinum_rift.allocator import SPAWN_COST
from platinum_rift.catalogue import movement_catalog, spawn_catalog
from platinum_rift.errors import ConfigError

DEFAULT_PARAMS: Dict[str, Any] = {
    # Allocation heuristics
    "MOVE_POLICY": "resource_first",
    "SPAWN_POLICY": "random",
    "SPLIT_STACKS": False,
    # Restrict the "random" spawn policy to one continent (None = anywhere)
    "SPAWN_CONTINENT": None,

    "SPAWN_COST": SPAWN_COST,

    # None seeds from wall-clock time and faction id
    "SEED": None,
    "LOG_LEVEL": "WARNING",
}


def load_params(params_json: Optional[str], params_file: Optional[str]) -> Dict[str, Any]:
    if params_json and params_file:
        raise ConfigError("Use only one of --params or --params-file")

    if params_file:
        p = Path(params_file)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"could not read {p}: {e}") from None
        if not isinstance(data, dict):
            raise ConfigError("--params-file must contain a JSON object")
        return data

    if params_json:
        try:
            data = json.loads(params_json)
        except ValueError as e:
            raise ConfigError(f"--params is not valid JSON: {e}") from None
        if not isinstance(data, dict):
            raise ConfigError("--params must be a JSON object")
        return data

    return {}


@dataclass(frozen=True)
class EngineConfig:
    move_policy: str = DEFAULT_PARAMS["MOVE_POLICY"]
    spawn_policy: str = DEFAULT_PARAMS["SPAWN_POLICY"]
    split_stacks: bool = DEFAULT_PARAMS["SPLIT_STACKS"]
    spawn_continent: Optional[int] = DEFAULT_PARAMS["SPAWN_CONTINENT"]
    spawn_cost: int = DEFAULT_PARAMS["SPAWN_COST"]
    seed: Optional[int] = DEFAULT_PARAMS["SEED"]
    log_level: str = DEFAULT_PARAMS["LOG_LEVEL"]

    def __post_init__(self) -> None:
        if self.move_policy not in movement_catalog:
            raise ConfigError(f"unknown MOVE_POLICY '{self.move_policy}'")
        if self.spawn_policy not in spawn_catalog:
            raise ConfigError(f"unknown SPAWN_POLICY '{self.spawn_policy}'")
        if self.spawn_continent is not None and not isinstance(self.spawn_continent, int):
            raise ConfigError(f"SPAWN_CONTINENT must be an integer or null, got {self.spawn_continent!r}")
        if not isinstance(self.spawn_cost, int) or self.spawn_cost <= 0:
            raise ConfigError(f"SPAWN_COST must be a positive integer, got {self.spawn_cost!r}")

    @classmethod
    def from_params(cls, params: Optional[Dict[str, Any]] = None) -> "EngineConfig":
        merged = dict(DEFAULT_PARAMS)
        for k, v in (params or {}).items():
            key = str(k).upper()
            if key not in DEFAULT_PARAMS:
                raise ConfigError(f"unknown parameter '{k}'")
            merged[key] = v
        return cls(**{k.lower(): v for k, v in merged.items()})
