from __future__ import annotations

import logging
import random
import time
from typing import Iterable, Optional, Sequence, Tuple

from platinum_rift.allocator import ResourceAllocator, TurnDecision
from platinum_rift.catalogue import make_movement, make_spawning
from platinum_rift.config import EngineConfig
from platinum_rift.errors import EngineInvariantError, ProtocolError
from platinum_rift.logger import turn_extra
from platinum_rift.pathfinding import PathCache
from platinum_rift.turn_state import TurnState
from platinum_rift.zone_graph import ZoneGraph

log = logging.getLogger(__name__)


def default_seed(faction: int) -> int:
    # Two copies of the bot in one match must not share a sequence.
    return int(time.time() * 1000) * (faction + 1) + faction


class DecisionEngine:
    """
    Owns the zone graph for the whole game and turns each snapshot into
    move and spawn orders.

    Args:
        config (EngineConfig): Policies and tunables; defaults when omitted.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.graph: Optional[ZoneGraph] = None
        self.faction = 0
        self.round_number = 0
        self.rng: Optional[random.Random] = None
        self.allocator: Optional[ResourceAllocator] = None
        self.last_state: Optional[TurnState] = None

    def setup(self, faction_count: int, faction: int,
              zones: Iterable[Tuple[int, int]], links: Iterable[Tuple[int, int]]) -> ZoneGraph:
        if not 0 <= faction < faction_count:
            raise ProtocolError(f"player id {faction} outside 0..{faction_count - 1}")
        graph = ZoneGraph(faction_count)
        for zone_id, value in zones:
            graph.add_zone(zone_id, value)
        for a, b in links:
            graph.add_link(a, b)
        graph.seal()

        self.graph = graph
        self.faction = faction
        self.round_number = 0

        seed = self.config.seed if self.config.seed is not None else default_seed(faction)
        self.rng = random.Random(seed)
        self.allocator = ResourceAllocator(
            make_movement(self.config.move_policy, split_stacks=self.config.split_stacks),
            make_spawning(self.config.spawn_policy, rng=self.rng, continent=self.config.spawn_continent),
            spawn_cost=self.config.spawn_cost,
        )
        log.info(
            "Setup: faction %d/%d, %d zones, policies %s/%s, seed %d",
            faction, faction_count, graph.zone_count,
            self.config.move_policy, self.config.spawn_policy, seed,
        )
        return graph

    def decide(self, budget: int, updates: Sequence) -> TurnDecision:
        """
        Apply a full snapshot and return this turn's orders.

        Args:
            budget: Spendable pool for the turn.
            updates: One (zone_id, owner, garrison) entry per zone, as
                tuples or objects with those attributes.

        Raises:
            EngineInvariantError: If called before setup().
            ProtocolError: If the snapshot does not cover every zone.
        """
        if self.graph is None or self.allocator is None:
            raise EngineInvariantError("decide() called before setup()")

        started = time.perf_counter()

        seen = set()
        for update in updates:
            zone_id, owner, garrison = _unpack(update)
            self.graph.apply_turn_update(zone_id, owner, garrison)
            seen.add(zone_id)
        if len(seen) != self.graph.zone_count:
            raise ProtocolError(f"snapshot covered {len(seen)} of {self.graph.zone_count} zones")

        self.round_number += 1

        state = TurnState.build(self.graph, self.faction, budget, self.round_number)
        paths = PathCache(self.graph)
        decision = self.allocator.allocate(self.graph, state, paths)
        self.last_state = state

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        log.info(
            "Turn done: %d moves, %d spawns, budget %d left, %d path runs (%.1f ms)",
            len(decision.moves), len(decision.spawns), state.budget, len(paths), elapsed_ms,
            extra=turn_extra(self.round_number),
        )
        return decision


def _unpack(update) -> Tuple[int, int, Sequence[int]]:
    if isinstance(update, tuple):
        zone_id, owner, garrison = update
        return zone_id, owner, garrison
    return update.zone_id, update.owner, update.garrison
