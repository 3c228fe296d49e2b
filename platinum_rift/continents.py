"""Connected components ("continents") of the zone graph."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, List

if TYPE_CHECKING:
    from platinum_rift.zone_graph import ZoneGraph


@dataclass
class Continent:
    continent_id: int
    zone_ids: List[int] = field(default_factory=list)
    resource_zone_ids: List[int] = field(default_factory=list)
    total_resource: int = 0

    def __post_init__(self) -> None:
        self._members = set(self.zone_ids)

    def __contains__(self, zone_id: int) -> bool:
        return zone_id in self._members

    @property
    def size(self) -> int:
        return len(self.zone_ids)


def compute_continents(graph: "ZoneGraph") -> List[Continent]:
    """
    Partition the graph into continents and stamp each zone's continent_id.

    Zones are visited in ascending id order and each unvisited zone seeds a
    breadth-first flood, so continent ids depend only on the topology.
    """
    zones = graph.zones
    visited = [False] * len(zones)
    continents: List[Continent] = []

    for seed in zones:
        if visited[seed.zone_id]:
            continue
        continent_id = len(continents)
        members: List[int] = []
        queue: Deque[int] = deque([seed.zone_id])
        visited[seed.zone_id] = True

        while queue:
            zid = queue.popleft()
            members.append(zid)
            graph.zone(zid).continent_id = continent_id
            for nid in graph.zone(zid).neighbors:
                if not visited[nid]:
                    visited[nid] = True
                    queue.append(nid)

        members.sort()
        resource_ids = [zid for zid in members if graph.zone(zid).resource_value > 0]
        continents.append(
            Continent(
                continent_id=continent_id,
                zone_ids=members,
                resource_zone_ids=resource_ids,
                total_resource=sum(graph.zone(zid).resource_value for zid in resource_ids),
            )
        )

    return continents
