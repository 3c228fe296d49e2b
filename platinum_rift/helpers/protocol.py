"""Parsing and formatting for the Platinum Rift turn protocol."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

from platinum_rift.allocator import MoveOrder, SpawnOrder
from platinum_rift.errors import ProtocolError
from platinum_rift.zone_graph import MAX_FACTIONS

WAIT = "WAIT"


@dataclass(frozen=True)
class SetupInfo:
    faction_count: int
    faction: int
    zones: List[Tuple[int, int]]
    links: List[Tuple[int, int]]


@dataclass(frozen=True)
class ZoneUpdate:
    zone_id: int
    owner: int
    garrison: Tuple[int, ...]


@dataclass(frozen=True)
class TurnInfo:
    budget: int
    updates: List[ZoneUpdate]


def _ints(line: str, count: int, what: str) -> List[int]:
    parts = line.split()
    if len(parts) < count:
        raise ProtocolError(f"{what}: expected {count} integers, got {line!r}")
    try:
        return [int(p) for p in parts[:count]]
    except ValueError:
        raise ProtocolError(f"{what}: non-integer token in {line!r}") from None


def parse_setup(raw_lines: Sequence[str]) -> SetupInfo:
    if not raw_lines:
        raise ProtocolError("setup header missing")

    faction_count, faction, zone_count, link_count = _ints(raw_lines[0], 4, "setup header")
    if not 0 <= faction < faction_count:
        raise ProtocolError(f"player id {faction} outside 0..{faction_count - 1}")
    if zone_count < 0 or link_count < 0:
        raise ProtocolError("negative zone or link count")

    expected = 1 + zone_count + link_count
    if len(raw_lines) < expected:
        raise ProtocolError(f"setup truncated: {len(raw_lines)} of {expected} lines")

    zones = [tuple(_ints(raw_lines[1 + i], 2, "zone")) for i in range(zone_count)]
    cursor = 1 + zone_count
    links = [tuple(_ints(raw_lines[cursor + i], 2, "link")) for i in range(link_count)]
    return SetupInfo(faction_count=faction_count, faction=faction, zones=zones, links=links)


def parse_turn(raw_lines: Sequence[str], zone_count: int) -> TurnInfo:
    if not raw_lines:
        raise ProtocolError("turn budget line missing")
    budget = _ints(raw_lines[0], 1, "budget")[0]
    if len(raw_lines) < 1 + zone_count:
        raise ProtocolError(f"turn truncated: {len(raw_lines) - 1} of {zone_count} zone lines")

    updates: List[ZoneUpdate] = []
    for line in raw_lines[1:1 + zone_count]:
        values = _ints(line, 2 + MAX_FACTIONS, "zone update")
        updates.append(ZoneUpdate(zone_id=values[0], owner=values[1], garrison=tuple(values[2:])))
    return TurnInfo(budget=budget, updates=updates)


def read_setup(read_line: Callable[[], str] = input) -> SetupInfo:
    try:
        header = read_line()
    except EOFError:
        raise ProtocolError("input ended before the setup header") from None
    counts = _ints(header, 4, "setup header")
    lines = [header]
    try:
        for _ in range(counts[2] + counts[3]):
            lines.append(read_line())
    except EOFError:
        raise ProtocolError(f"setup ended after {len(lines)} lines") from None
    return parse_setup(lines)


def read_turn(read_line: Callable[[], str], zone_count: int) -> TurnInfo:
    """
    Read one turn. EOFError before the budget line means the game is over
    and is left to the caller; EOF inside the zone block is a ProtocolError.
    """
    lines = [read_line()]
    try:
        for _ in range(zone_count):
            lines.append(read_line())
    except EOFError:
        raise ProtocolError(f"input ended after {len(lines) - 1} of {zone_count} zone lines") from None
    return parse_turn(lines, zone_count)


def format_moves(orders: Iterable[MoveOrder]) -> str:
    tokens = [f"{o.units} {o.source} {o.dest}" for o in orders]
    return " ".join(tokens) if tokens else WAIT


def format_spawns(orders: Iterable[SpawnOrder]) -> str:
    tokens = [f"{o.units} {o.zone}" for o in orders]
    return " ".join(tokens) if tokens else WAIT
