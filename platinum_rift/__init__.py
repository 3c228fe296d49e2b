"""Decision engine for the Platinum Rift territory-control game."""

from platinum_rift.zone_graph import MAX_FACTIONS, UNCLAIMED, Zone, ZoneGraph
from platinum_rift.engine import DecisionEngine

__all__ = ["DecisionEngine", "MAX_FACTIONS", "UNCLAIMED", "Zone", "ZoneGraph"]
