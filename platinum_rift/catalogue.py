import random
from typing import Optional

from platinum_rift.allocator import (
    BalancedSpawn,
    MovementPolicy,
    NearestEnemyMovement,
    RandomSpawn,
    ResourceFirstMovement,
    SpawnPolicy,
    SpreadMovement,
    UnclaimedFirstSpawn,
)
from platinum_rift.errors import ConfigError

movement_catalog = {
    cls.name: cls
    for cls in (ResourceFirstMovement, NearestEnemyMovement, SpreadMovement)
}

spawn_catalog = {
    cls.name: cls
    for cls in (RandomSpawn, UnclaimedFirstSpawn, BalancedSpawn)
}


def list_policies():
    """
    Returns the available policy names.

    Returns:
        dict: {"movement": [...], "spawn": [...]}
    """
    return {"movement": sorted(movement_catalog), "spawn": sorted(spawn_catalog)}


def make_movement(name: str, split_stacks: bool = False) -> MovementPolicy:
    if name not in movement_catalog:
        raise ConfigError(f"Movement policy '{name}' not found. Choose from {sorted(movement_catalog)}.")
    return movement_catalog[name](split_stacks=split_stacks)


def make_spawning(name: str, rng: Optional[random.Random] = None,
                  continent: Optional[int] = None) -> SpawnPolicy:
    if name not in spawn_catalog:
        raise ConfigError(f"Spawn policy '{name}' not found. Choose from {sorted(spawn_catalog)}.")
    return spawn_catalog[name](rng=rng, continent=continent)
