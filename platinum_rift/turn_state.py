"""Per-turn view of the board for the acting faction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from platinum_rift.errors import EngineInvariantError
from platinum_rift.zone_graph import UNCLAIMED, ZoneGraph


@dataclass
class TurnState:
    faction: int
    round_number: int
    budget: int
    friendly: List[int] = field(default_factory=list)
    enemy: List[int] = field(default_factory=list)
    unclaimed: List[int] = field(default_factory=list)
    mobile: List[int] = field(default_factory=list)
    hostile_mobile: List[int] = field(default_factory=list)
    reserved: Dict[int, int] = field(default_factory=dict)
    # Per-continent garrison totals, indexed by continent id.
    friendly_strength: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    enemy_strength: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    garrison: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def build(cls, graph: ZoneGraph, faction: int, budget: int, round_number: int = 0) -> "TurnState":
        """Classify every zone from the graph's current owner/garrison fields."""
        if not graph.sealed:
            raise EngineInvariantError("turn state needs a sealed graph")
        if not 0 <= faction < graph.faction_count:
            raise EngineInvariantError(f"acting faction {faction} outside 0..{graph.faction_count - 1}")
        if budget < 0:
            raise EngineInvariantError(f"negative budget {budget}")

        state = cls(faction=faction, round_number=round_number, budget=budget)
        n_continents = len(graph.continents)
        state.friendly_strength = np.zeros(n_continents, dtype=np.int64)
        state.enemy_strength = np.zeros(n_continents, dtype=np.int64)

        for zone in graph.zones:
            zid = zone.zone_id
            if zone.owner == UNCLAIMED:
                state.unclaimed.append(zid)
            elif zone.owner == faction:
                state.friendly.append(zid)
            else:
                state.enemy.append(zid)

            ours = zone.units_of(faction)
            theirs = zone.enemy_units(faction)
            if ours > 0:
                state.mobile.append(zid)
                state.garrison[zid] = ours
            if theirs > 0:
                state.hostile_mobile.append(zid)
            state.friendly_strength[zone.continent_id] += ours
            state.enemy_strength[zone.continent_id] += theirs

        return state

    def available(self, zone_id: int) -> int:
        return self.garrison.get(zone_id, 0) - self.reserved.get(zone_id, 0)

    def reserve(self, zone_id: int, units: int) -> None:
        if units <= 0:
            raise EngineInvariantError(f"reserving {units} units at zone {zone_id}")
        if units > self.available(zone_id):
            raise EngineInvariantError(
                f"zone {zone_id} has {self.available(zone_id)} free units, {units} requested"
            )
        self.reserved[zone_id] = self.reserved.get(zone_id, 0) + units

    def spend(self, amount: int) -> None:
        if amount > self.budget:
            raise EngineInvariantError(f"spending {amount} with only {self.budget} left")
        self.budget -= amount

    def available_spawns(self, cost: int) -> int:
        """How many units the remaining budget still buys."""
        return self.budget // cost

    def free_stacks(self) -> List[int]:
        return [zid for zid in self.mobile if self.available(zid) > 0]
