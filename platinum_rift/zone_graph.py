"""
Zone graph for the Platinum Rift map.

The topology (zones, resource values, links) is fixed during setup and sealed
once; after that only ownership and garrisons change, through one full
snapshot per turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from platinum_rift.continents import Continent, compute_continents
from platinum_rift.errors import GraphSetupError, ProtocolError

log = logging.getLogger(__name__)

UNCLAIMED = -1
MAX_FACTIONS = 4


@dataclass(eq=False)
class Zone:
    zone_id: int
    resource_value: int = 0
    owner: int = UNCLAIMED
    garrison: np.ndarray = field(default_factory=lambda: np.zeros(MAX_FACTIONS, dtype=np.int64))
    continent_id: int = -1
    neighbors: List[int] = field(default_factory=list)

    def __str__(self) -> str:
        pods = ",".join(str(int(n)) for n in self.garrison)
        return (
            f"Zone[{self.zone_id}](O:{self.owner} V:{self.resource_value} "
            f"C:{self.continent_id} PODS:{pods})"
        )

    def units_of(self, faction: int) -> int:
        return int(self.garrison[faction])

    def enemy_units(self, faction: int) -> int:
        return int(self.garrison.sum() - self.garrison[faction])

    def is_spawnable(self, faction: int) -> bool:
        return self.owner == UNCLAIMED or self.owner == faction

    def is_hostile_to(self, faction: int) -> bool:
        return self.owner != UNCLAIMED and self.owner != faction


class ZoneGraph:
    """
    Undirected graph of zones.

    Args:
        faction_count (int): Number of factions in the match (1..MAX_FACTIONS).
            The garrison vector always has MAX_FACTIONS slots, as in the
            turn protocol.

    Raises:
        GraphSetupError: If the faction count is out of range.
    """

    def __init__(self, faction_count: int = MAX_FACTIONS):
        if not 1 <= faction_count <= MAX_FACTIONS:
            raise GraphSetupError(f"faction count must be in 1..{MAX_FACTIONS}, got {faction_count}")
        self.faction_count = faction_count
        self._zones: Dict[int, Zone] = {}
        self._ordered: List[Zone] = []
        self._continents: List[Continent] = []
        self._sealed = False

    # -- setup -------------------------------------------------------------

    def add_zone(self, zone_id: int, resource_value: int = 0) -> Zone:
        self._check_setup()
        if zone_id in self._zones:
            raise GraphSetupError(f"zone {zone_id} added twice")
        if zone_id < 0:
            raise GraphSetupError(f"negative zone id {zone_id}")
        if resource_value < 0:
            raise GraphSetupError(f"zone {zone_id} has negative resource value {resource_value}")
        zone = Zone(zone_id=zone_id, resource_value=resource_value)
        self._zones[zone_id] = zone
        return zone

    def add_link(self, zone_a: int, zone_b: int) -> None:
        self._check_setup()
        if zone_a == zone_b:
            raise GraphSetupError(f"self-link on zone {zone_a}")
        a = self._zones.get(zone_a)
        b = self._zones.get(zone_b)
        if a is None or b is None:
            missing = zone_a if a is None else zone_b
            raise GraphSetupError(f"link {zone_a}-{zone_b} references unknown zone {missing}")
        if zone_b in a.neighbors:
            return
        a.neighbors.append(zone_b)
        b.neighbors.append(zone_a)

    def seal(self) -> None:
        """
        Finish setup: validate that ids are dense and partition into continents.

        Neighbour lists are sorted so every traversal sees them in ascending
        id order.
        """
        self._check_setup()
        ids = sorted(self._zones)
        if ids != list(range(len(ids))):
            raise GraphSetupError("zone ids must be dense 0..N-1")
        self._ordered = [self._zones[i] for i in ids]
        for zone in self._ordered:
            zone.neighbors.sort()
        self._continents = compute_continents(self)
        self._sealed = True
        log.info("Graph sealed: %d zones, %d continents", len(self._ordered), len(self._continents))

    def _check_setup(self) -> None:
        if self._sealed:
            raise GraphSetupError("graph topology is fixed once sealed")

    # -- play --------------------------------------------------------------

    def apply_turn_update(self, zone_id: int, owner: int, garrison: Sequence[int]) -> None:
        if not self._sealed:
            raise GraphSetupError("turn updates require a sealed graph")
        zone = self._zones.get(zone_id)
        if zone is None:
            raise ProtocolError(f"update for unknown zone {zone_id}")
        if owner != UNCLAIMED and not 0 <= owner < self.faction_count:
            raise ProtocolError(f"zone {zone_id} has invalid owner {owner}")
        if len(garrison) != MAX_FACTIONS:
            raise ProtocolError(f"zone {zone_id} garrison needs {MAX_FACTIONS} slots, got {len(garrison)}")
        pods = np.asarray(garrison, dtype=np.int64)
        if (pods < 0).any():
            raise ProtocolError(f"zone {zone_id} has a negative garrison: {list(garrison)}")
        zone.owner = owner
        zone.garrison = pods

    # -- queries -----------------------------------------------------------

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def zones(self) -> List[Zone]:
        """Zones in ascending id order."""
        if self._sealed:
            return self._ordered
        return [self._zones[i] for i in sorted(self._zones)]

    @property
    def zone_count(self) -> int:
        return len(self._zones)

    @property
    def continents(self) -> List[Continent]:
        return self._continents

    def zone(self, zone_id: int) -> Zone:
        try:
            return self._zones[zone_id]
        except KeyError:
            raise GraphSetupError(f"unknown zone {zone_id}") from None

    def continent_of(self, zone_id: int) -> Continent:
        return self._continents[self.zone(zone_id).continent_id]

    def neighbors(self, zone_id: int) -> List[Zone]:
        return [self._zones[n] for n in self.zone(zone_id).neighbors]

    def unclaimed_neighbors(self, zone_id: int) -> List[Zone]:
        return self.owned_neighbors(zone_id, UNCLAIMED)

    def owned_neighbors(self, zone_id: int, owner: int) -> List[Zone]:
        return [z for z in self.neighbors(zone_id) if z.owner == owner]

    def defeatable_neighbors(self, zone_id: int, faction: int) -> List[Zone]:
        """Enemy-held neighbours whose owner garrison is smaller than ours here."""
        ours = self.zone(zone_id).units_of(faction)
        return [
            z for z in self.neighbors(zone_id)
            if z.is_hostile_to(faction) and ours > z.units_of(z.owner)
        ]
