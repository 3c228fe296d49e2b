"""Ownership-biased Dijkstra."""

import pytest

from conftest import build_graph, set_board
from platinum_rift.errors import EngineInvariantError
from platinum_rift.pathfinding import PathCache, find_path, shortest_paths, step_cost
from platinum_rift.zone_graph import UNCLAIMED, ZoneGraph


def _hop_cost_sum(graph, result, path):
    return sum(step_cost(graph.zone(zid).owner, result.faction) for zid in path)


def test_step_cost_rule():
    assert step_cost(1, 0) == 1
    assert step_cost(UNCLAIMED, 0) == 2
    assert step_cost(0, 0) == 3
    # An unclaimed reference faction still pays 2 for unclaimed zones.
    assert step_cost(UNCLAIMED, UNCLAIMED) == 2


def test_line_path_to_resource(line_graph):
    result = shortest_paths(line_graph, 0)
    assert result.path_to(3) == [1, 2, 3]
    assert result.cost_to(3) == 6
    assert result.next_hop(3) == 1
    assert result.path_to(0) == []
    assert result.cost_to(0) == 0


def test_no_path_across_continents(split_graph):
    result = shortest_paths(split_graph, 0)
    assert result.path_to(2) == []
    assert result.path_to(3) == []
    assert not result.reachable(2)
    assert result.cost_to(3) is None
    assert result.path_to(1) == [1]


def test_prefers_enemy_then_unclaimed_then_friendly():
    # Diamond 0-{1,2,3}-4: 1 is ours, 2 unclaimed, 3 enemy.
    graph = build_graph([0] * 5, [(0, 1), (0, 2), (0, 3), (1, 4), (2, 4), (3, 4)])
    set_board(graph, [0, 0, UNCLAIMED, 1, UNCLAIMED], {0: (2, 0, 0, 0)})
    result = shortest_paths(graph, 0)
    assert result.path_to(4) == [3, 4]
    assert result.cost_to(4) == 1 + 2
    assert result.cost_to(1) == 3


def test_ties_go_to_lowest_zone_id():
    # Square 0-1-3, 0-2-3 with equal costs; 3 should come through 1.
    graph = build_graph([0] * 4, [(0, 2), (0, 1), (2, 3), (1, 3)])
    set_board(graph, [0, UNCLAIMED, UNCLAIMED, UNCLAIMED])
    assert shortest_paths(graph, 0).path_to(3) == [1, 3]


def test_distances_and_predecessor_chains(rng):
    for _ in range(15):
        n = rng.randint(2, 25)
        links = {(i, rng.randrange(i)) for i in range(1, n)}
        links |= {(rng.randrange(n), rng.randrange(n)) for _ in range(n)}
        links = sorted((a, b) for a, b in links if a != b)
        graph = build_graph([0] * n, links)
        owners = [rng.choice([UNCLAIMED, 0, 1]) for _ in range(n)]
        set_board(graph, owners)

        source = rng.randrange(n)
        result = shortest_paths(graph, source, faction=0)
        assert result.distance[source] == 0
        assert result.predecessor[source] is None
        assert set(result.distance) == set(range(n))

        for zid in range(n):
            if zid == source:
                continue
            pred = result.predecessor[zid]
            assert result.distance[pred] < result.distance[zid]

            seen = set()
            cur = zid
            while cur is not None:
                assert cur not in seen
                seen.add(cur)
                cur = result.predecessor[cur]
            assert source in seen

            path = result.path_to(zid)
            assert path[-1] == zid
            assert _hop_cost_sum(graph, result, path) == result.distance[zid]

        settled = [result.distance[z] for z in result.order]
        assert settled == sorted(settled)


def test_find_path_goal_test(line_graph):
    assert find_path(line_graph, 0, lambda z: z.resource_value > 0) == [1, 2, 3]
    assert find_path(line_graph, 0, lambda z: z.owner == 0) == []
    assert find_path(line_graph, 0, lambda z: z.resource_value > 99) == []


def test_source_without_continent_is_an_error():
    graph = ZoneGraph(2)
    graph.add_zone(0, 0)
    with pytest.raises(EngineInvariantError):
        shortest_paths(graph, 0, faction=0)


def test_path_cache_runs_once_per_source(line_graph):
    cache = PathCache(line_graph)
    first = cache(0)
    assert cache(0) is first
    cache(2)
    assert len(cache) == 2


def test_costs_follow_the_source_owner():
    # Star around 0 (held by faction 1): 1 is faction 0's, 2 is faction 1's, 3 unclaimed.
    graph = build_graph([0] * 4, [(0, 1), (0, 2), (0, 3)])
    set_board(graph, [1, 0, 1, UNCLAIMED], {0: (2, 0, 0, 0)})
    result = shortest_paths(graph, 0)
    assert result.faction == 1
    assert result.cost_to(1) == 1
    assert result.cost_to(2) == 3
    assert result.cost_to(3) == 2


def test_unclaimed_source_treats_every_owner_as_enemy():
    graph = build_graph([0] * 4, [(0, 1), (0, 2), (0, 3)])
    set_board(graph, [UNCLAIMED, 0, 1, UNCLAIMED], {0: (1, 0, 0, 0)})
    result = shortest_paths(graph, 0)
    assert result.faction == UNCLAIMED
    assert result.cost_to(1) == 1
    assert result.cost_to(2) == 1
    assert result.cost_to(3) == 2


def test_find_path_reuses_the_turn_cache(line_graph):
    cache = PathCache(line_graph)
    assert find_path(line_graph, 0, lambda z: z.resource_value > 0, cache) == [1, 2, 3]
    assert find_path(line_graph, 0, lambda z: z.owner != 0, cache) == [1]
    assert len(cache) == 1
