"""
Greedy allocation of mobile stacks and spawn budget.

Movement is decided first, then spawning, both against the same TurnState.
Each half is a pluggable policy so heuristics can be swapped at startup
without touching the graph, partition or pathfinding code.
"""

from __future__ import annotations

import logging
import random
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from platinum_rift.errors import EngineInvariantError
from platinum_rift.pathfinding import PathResult, find_path
from platinum_rift.turn_state import TurnState
from platinum_rift.zone_graph import ZoneGraph

log = logging.getLogger(__name__)

SPAWN_COST = 20

PathLookup = Callable[[int], PathResult]


@dataclass(frozen=True)
class MoveOrder:
    units: int
    source: int
    dest: int


@dataclass(frozen=True)
class SpawnOrder:
    units: int
    zone: int


@dataclass
class TurnDecision:
    moves: List[MoveOrder] = field(default_factory=list)
    spawns: List[SpawnOrder] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------

class MovementPolicy:
    name = ""

    def __init__(self, split_stacks: bool = False):
        self.split_stacks = split_stacks

    def plan(self, graph: ZoneGraph, state: TurnState, paths: PathLookup) -> List[MoveOrder]:
        raise NotImplementedError

    def _send_all(self, state: TurnState, paths: PathLookup, stack: int, target: int,
                  orders: List[MoveOrder]) -> bool:
        hop = paths(stack).next_hop(target)
        if hop is None:
            return False
        units = state.available(stack)
        state.reserve(stack, units)
        orders.append(MoveOrder(units, stack, hop))
        log.debug("Stack %d: %d units -> %d (toward %d)", stack, units, hop, target)
        return True

    def _advance_to_front(self, graph: ZoneGraph, state: TurnState, paths: PathLookup,
                          orders: List[MoveOrder]) -> None:
        """Send every free stack toward its nearest zone not owned by us."""
        for stack in state.free_stacks():
            path = find_path(graph, stack, lambda z: z.owner != state.faction, paths)
            if not path:
                continue
            units = state.available(stack)
            state.reserve(stack, units)
            orders.append(MoveOrder(units, stack, path[0]))


class NearestEnemyMovement(MovementPolicy):
    """
    Strike an adjacent enemy zone we outnumber, weakest first; failing that
    step into an adjacent unclaimed zone. Stacks with neither head for the
    nearest non-friendly zone.
    """

    name = "nearest_enemy"

    def plan(self, graph: ZoneGraph, state: TurnState, paths: PathLookup) -> List[MoveOrder]:
        orders: List[MoveOrder] = []
        for stack in state.free_stacks():
            beaten = graph.defeatable_neighbors(stack, state.faction)
            if beaten:
                target = min(beaten, key=lambda z: (z.units_of(z.owner), z.zone_id))
            else:
                free_land = graph.unclaimed_neighbors(stack)
                if not free_land:
                    continue
                target = free_land[0]
            units = state.available(stack)
            state.reserve(stack, units)
            orders.append(MoveOrder(units, stack, target.zone_id))
            log.debug("Stack %d: %d units -> neighbour %s", stack, units, target)
        self._advance_to_front(graph, state, paths, orders)
        return orders


class ResourceFirstMovement(MovementPolicy):
    """
    For each resource zone we do not own, richest first, pick the closest
    free stack on the same continent and send it one hop toward it. Stacks
    left over head for the nearest non-friendly zone.
    """

    name = "resource_first"

    def plan(self, graph: ZoneGraph, state: TurnState, paths: PathLookup) -> List[MoveOrder]:
        orders: List[MoveOrder] = []
        targets = sorted(
            (z for z in graph.zones if z.resource_value > 0 and z.owner != state.faction),
            key=lambda z: (-z.resource_value, z.zone_id),
        )

        for target in targets:
            best: Optional[Tuple[int, int]] = None
            for stack in state.free_stacks():
                if graph.zone(stack).continent_id != target.continent_id:
                    continue
                cost = paths(stack).cost_to(target.zone_id)
                if cost is None:
                    continue
                if best is None or (cost, stack) < best:
                    best = (cost, stack)
            if best is None:
                continue

            stack = best[1]
            if stack == target.zone_id:
                # Already standing on it: hold.
                state.reserve(stack, state.available(stack))
                log.debug("Stack %d holds resource zone", stack)
                continue
            self._send_all(state, paths, stack, target.zone_id, orders)

        self._advance_to_front(graph, state, paths, orders)
        return orders


class SpreadMovement(MovementPolicy):
    """
    Assign stacks to distinct objectives so they fan out instead of all
    converging on the same zone. Resource zones rank before other
    non-friendly zones, then by path cost.

    With split_stacks a stack sends one unit per objective; whatever is left
    follows its first order.
    """

    name = "spread"

    def plan(self, graph: ZoneGraph, state: TurnState, paths: PathLookup) -> List[MoveOrder]:
        candidates: List[Tuple[int, int, int, int]] = []
        for stack in state.free_stacks():
            result = paths(stack)
            for zid in result.order:
                zone = graph.zone(zid)
                if zid == stack or zone.owner == state.faction:
                    continue
                rank = 0 if zone.resource_value > 0 else 1
                candidates.append((rank, result.distance[zid], zid, stack))
        candidates.sort()

        merged: "OrderedDict[Tuple[int, int], int]" = OrderedDict()
        first_hop: Dict[int, int] = {}
        claimed = set()

        for _, _, target, stack in candidates:
            if target in claimed:
                continue
            free = state.available(stack)
            if free <= 0:
                continue
            hop = paths(stack).next_hop(target)
            if hop is None:
                continue
            units = 1 if self.split_stacks else free
            state.reserve(stack, units)
            merged[(stack, hop)] = merged.get((stack, hop), 0) + units
            first_hop.setdefault(stack, hop)
            claimed.add(target)

        for stack, hop in first_hop.items():
            free = state.available(stack)
            if free > 0:
                state.reserve(stack, free)
                merged[(stack, hop)] += free

        return [MoveOrder(units, src, dst) for (src, dst), units in merged.items()]


# ---------------------------------------------------------------------------
# Spawning
# ---------------------------------------------------------------------------

class SpawnPolicy:
    name = ""

    def __init__(self, rng: Optional[random.Random] = None, continent: Optional[int] = None):
        self.rng = rng or random.Random()
        self.continent = continent

    def plan(self, graph: ZoneGraph, state: TurnState, cost: int = SPAWN_COST) -> List[SpawnOrder]:
        if cost <= 0:
            raise EngineInvariantError(f"spawn cost must be positive, got {cost}")
        orders: List[SpawnOrder] = []
        self.begin_turn(graph, state)
        for _ in range(state.available_spawns(cost)):
            zid = self.choose(graph, state)
            if zid is None:
                log.debug("No spawnable zone; %d budget unspent", state.budget)
                break
            state.spend(cost)
            orders.append(SpawnOrder(1, zid))
            self.record(graph, zid)
        return orders

    def begin_turn(self, graph: ZoneGraph, state: TurnState) -> None:
        self._spawnable = [
            z.zone_id for z in graph.zones
            if z.is_spawnable(state.faction) and (self.continent is None or z.continent_id == self.continent)
        ]

    def choose(self, graph: ZoneGraph, state: TurnState) -> Optional[int]:
        raise NotImplementedError

    def record(self, graph: ZoneGraph, zone_id: int) -> None:
        pass

    def _pick(self, pool: List[int]) -> Optional[int]:
        if not pool:
            return None
        return pool[self.rng.randrange(len(pool))]


class RandomSpawn(SpawnPolicy):
    name = "random"

    def choose(self, graph: ZoneGraph, state: TurnState) -> Optional[int]:
        return self._pick(self._spawnable)


class UnclaimedFirstSpawn(SpawnPolicy):
    """Each unclaimed zone gets one unit before friendly zones get any."""

    name = "unclaimed_first"

    def begin_turn(self, graph: ZoneGraph, state: TurnState) -> None:
        super().begin_turn(graph, state)
        unclaimed = set(state.unclaimed)
        self._fresh = [zid for zid in self._spawnable if zid in unclaimed]
        self._owned = [zid for zid in self._spawnable if zid not in unclaimed]

    def choose(self, graph: ZoneGraph, state: TurnState) -> Optional[int]:
        if self._fresh:
            return self._pick(self._fresh)
        return self._pick(self._owned)

    def record(self, graph: ZoneGraph, zone_id: int) -> None:
        if zone_id in self._fresh:
            self._fresh.remove(zone_id)


class BalancedSpawn(SpawnPolicy):
    """
    Reinforce continents where enemy garrisons outnumber ours, smallest
    continent first, preferring resource zones inside it. Falls back to a
    uniform pick once every front is even.
    """

    name = "balanced"

    def begin_turn(self, graph: ZoneGraph, state: TurnState) -> None:
        super().begin_turn(graph, state)
        self._friendly = state.friendly_strength.copy()
        self._enemy = state.enemy_strength
        self._by_continent: Dict[int, List[int]] = {}
        for zid in self._spawnable:
            self._by_continent.setdefault(graph.zone(zid).continent_id, []).append(zid)
        self._sizes = {c.continent_id: c.size for c in graph.continents}

    def choose(self, graph: ZoneGraph, state: TurnState) -> Optional[int]:
        pressured = [
            cid for cid in self._by_continent
            if self._enemy[cid] > self._friendly[cid]
        ]
        if not pressured:
            return self._pick(self._spawnable)

        cid = min(pressured, key=lambda c: (self._sizes[c], c))
        pool = self._by_continent[cid]
        rich = [zid for zid in pool if graph.zone(zid).resource_value > 0]
        return self._pick(rich or pool)

    def record(self, graph: ZoneGraph, zone_id: int) -> None:
        self._friendly[graph.zone(zone_id).continent_id] += 1


class ResourceAllocator:
    """
    Runs one movement policy and one spawn policy per turn.

    Args:
        movement (MovementPolicy): Decides move orders for free stacks.
        spawning (SpawnPolicy): Decides where the turn budget is spent.
        spawn_cost (int): Budget consumed per spawned unit.
    """

    def __init__(self, movement: MovementPolicy, spawning: SpawnPolicy, spawn_cost: int = SPAWN_COST):
        self.movement = movement
        self.spawning = spawning
        self.spawn_cost = spawn_cost

    def allocate(self, graph: ZoneGraph, state: TurnState, paths: PathLookup) -> TurnDecision:
        moves = self.movement.plan(graph, state, paths)
        spawns = self.spawning.plan(graph, state, self.spawn_cost)
        return TurnDecision(moves=moves, spawns=spawns)
