"""Pytest configuration and shared map fixtures."""

import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from platinum_rift.zone_graph import UNCLAIMED, ZoneGraph


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--rng-seed",
        action="store",
        default="1234",
        help="Seed for the spawn-policy RNG in tests (default: 1234)"
    )


@pytest.fixture
def rng(request):
    """Seeded RNG from the --rng-seed option."""
    return random.Random(int(request.config.getoption("--rng-seed")))


def build_graph(values, links, faction_count=2):
    """Sealed graph from a list of resource values (index = zone id) and links."""
    graph = ZoneGraph(faction_count)
    for zid, value in enumerate(values):
        graph.add_zone(zid, value)
    for a, b in links:
        graph.add_link(a, b)
    graph.seal()
    return graph


def set_board(graph, owners, pods=None):
    """
    Apply one snapshot. owners[i] is zone i's owner; pods maps
    zone id -> 4-slot garrison (zeros elsewhere).
    """
    pods = pods or {}
    for zid, owner in enumerate(owners):
        graph.apply_turn_update(zid, owner, pods.get(zid, (0, 0, 0, 0)))


@pytest.fixture
def line_graph():
    """0-1-2-3, resource 5 on zone 3, faction 0 holds zone 0 with 3 pods."""
    graph = build_graph([0, 0, 0, 5], [(0, 1), (1, 2), (2, 3)])
    set_board(graph, [0, UNCLAIMED, UNCLAIMED, UNCLAIMED], {0: (3, 0, 0, 0)})
    return graph


@pytest.fixture
def split_graph():
    """Two disconnected pairs: 0-1 and 2-3."""
    graph = build_graph([0, 0, 0, 0], [(0, 1), (2, 3)])
    set_board(graph, [0, UNCLAIMED, UNCLAIMED, UNCLAIMED], {0: (1, 0, 0, 0)})
    return graph
