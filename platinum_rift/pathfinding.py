"""
Ownership-biased shortest paths inside one continent.

Entering a zone costs 1 when it is held by another faction, 2 when it is
unclaimed and 3 when it belongs to the faction owning the source zone, so routes
push through contested ground and avoid doubling back over friendly land.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from platinum_rift.errors import EngineInvariantError
from platinum_rift.zone_graph import UNCLAIMED, Zone, ZoneGraph

log = logging.getLogger(__name__)

COST_ENEMY = 1
COST_UNCLAIMED = 2
COST_FRIENDLY = 3


def step_cost(dest_owner: int, faction: int) -> int:
    if dest_owner == UNCLAIMED:
        return COST_UNCLAIMED
    if dest_owner == faction:
        return COST_FRIENDLY
    return COST_ENEMY


@dataclass
class PathResult:
    source: int
    faction: int
    distance: Dict[int, int] = field(default_factory=dict)
    predecessor: Dict[int, Optional[int]] = field(default_factory=dict)
    # Zones in settle order, i.e. ascending (distance, zone_id).
    order: List[int] = field(default_factory=list)

    def reachable(self, zone_id: int) -> bool:
        return zone_id in self.distance

    def cost_to(self, zone_id: int) -> Optional[int]:
        return self.distance.get(zone_id)

    def path_to(self, zone_id: int) -> List[int]:
        """Zone ids after the source up to and including zone_id; empty if unreachable."""
        if zone_id == self.source or zone_id not in self.distance:
            return []
        path: List[int] = []
        cur: Optional[int] = zone_id
        while cur is not None and cur != self.source:
            path.append(cur)
            cur = self.predecessor[cur]
        path.reverse()
        return path

    def next_hop(self, zone_id: int) -> Optional[int]:
        path = self.path_to(zone_id)
        return path[0] if path else None

    def nearest(self, predicate: Callable[[int], bool]) -> Optional[int]:
        """Closest settled zone satisfying predicate, the source included."""
        for zid in self.order:
            if predicate(zid):
                return zid
        return None


def shortest_paths(graph: ZoneGraph, source: int, faction: Optional[int] = None) -> PathResult:
    """
    Dijkstra from source over the source's continent.

    Args:
        graph: A sealed zone graph with this turn's ownership applied.
        source: Zone the stack starts from.
        faction: Reference faction for the cost rule. Defaults to the source
            zone's owner.

    Returns:
        PathResult with distances and predecessors for every zone reached.

    Raises:
        EngineInvariantError: If the source zone was never assigned a continent.
    """
    origin: Zone = graph.zone(source)
    if origin.continent_id < 0:
        raise EngineInvariantError(f"pathfinding from zone {source} which has no continent")
    if faction is None:
        faction = origin.owner

    result = PathResult(source=source, faction=faction)
    result.distance[source] = 0
    result.predecessor[source] = None

    settled = set()
    pq: List[Tuple[int, int]] = [(0, source)]

    while pq:
        dist, zid = heapq.heappop(pq)
        if zid in settled or dist > result.distance[zid]:
            continue
        settled.add(zid)
        result.order.append(zid)

        for nid in graph.zone(zid).neighbors:
            if nid in settled:
                continue
            neighbor = graph.zone(nid)
            if neighbor.continent_id != origin.continent_id:
                raise EngineInvariantError(f"link {zid}-{nid} crosses continents")
            alt = dist + step_cost(neighbor.owner, faction)
            if alt < result.distance.get(nid, alt + 1):
                result.distance[nid] = alt
                result.predecessor[nid] = zid
                heapq.heappush(pq, (alt, nid))

    return result


def find_path(graph: ZoneGraph, source: int, goal: Callable[[Zone], bool],
              paths: Optional[Callable[[int], PathResult]] = None) -> List[int]:
    """
    Path toward the nearest zone satisfying goal.

    Empty when the source itself satisfies goal or nothing in the continent
    does. Pass a PathCache as paths to reuse this turn's search.
    """
    result = paths(source) if paths is not None else shortest_paths(graph, source)
    target = result.nearest(lambda zid: goal(graph.zone(zid)))
    if target is None:
        return []
    log.debug("Target for %d: %s", source, graph.zone(target))
    return result.path_to(target)


class PathCache:
    """One PathResult per source for the current turn, priced by the source's owner."""

    def __init__(self, graph: ZoneGraph):
        self.graph = graph
        self._results: Dict[int, PathResult] = {}

    def __call__(self, source: int) -> PathResult:
        result = self._results.get(source)
        if result is None:
            result = shortest_paths(self.graph, source)
            self._results[source] = result
        return result

    def __len__(self) -> int:
        return len(self._results)
