"""\
STRATEGIC RIFT BOT
==================

CodinGame bot for Platinum Rift built on the platinum_rift decision engine.

Each turn it
- refreshes ownership and pods from the full snapshot,
- runs ownership-biased Dijkstra from every pod stack (per continent),
- moves stacks toward unowned platinum, then toward the nearest front,
- spends the platinum budget on new pods.

Usage:
  python strategic_rift_bot.py
  python strategic_rift_bot.py --params '{"SPAWN_POLICY": "balanced"}'
  python strategic_rift_bot.py --params-file best_params.json

Notes:
- Stdout carries the protocol (two lines per turn: moves, then spawns).
  Logs go to stderr; raise LOG_LEVEL to DEBUG to see targets per stack.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Callable, List, Optional

from platinum_rift.config import DEFAULT_PARAMS, EngineConfig, load_params
from platinum_rift.engine import DecisionEngine
from platinum_rift.errors import RiftError, report_and_exit
from platinum_rift.helpers.protocol import format_moves, format_spawns, read_setup, read_turn
from platinum_rift.logger import configure_logging


class StrategicRiftBot:
    """Thin protocol wrapper: read_init / read_turn / get_action."""

    def __init__(self, config: Optional[EngineConfig] = None,
                 read_line: Callable[[], str] = input):
        self.engine = DecisionEngine(config)
        self.read_line = read_line
        self.zone_count = 0
        self._turn = None

    def read_init(self) -> None:
        setup = read_setup(self.read_line)
        self.engine.setup(setup.faction_count, setup.faction, setup.zones, setup.links)
        self.zone_count = len(setup.zones)

    def read_turn(self) -> None:
        self._turn = read_turn(self.read_line, self.zone_count)

    def get_action(self) -> List[str]:
        decision = self.engine.decide(self._turn.budget, self._turn.updates)
        return [format_moves(decision.moves), format_spawns(decision.spawns)]


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(add_help=False)
    ap.add_argument("--params", type=str, default=None)
    ap.add_argument("--params-file", type=str, default=None)
    ap.add_argument("--dump-default-params", action="store_true")
    ap.add_argument("-h", "--help", action="store_true")
    ns, _ = ap.parse_known_args(argv)

    if ns.help:
        print(__doc__.strip())
        print()
        print("CLI:")
        print("  --params JSON          Inline JSON object")
        print("  --params-file PATH     JSON file containing object")
        print("  --dump-default-params  Print DEFAULT_PARAMS as JSON")
        return 0

    if ns.dump_default_params:
        print(json.dumps(DEFAULT_PARAMS, indent=2, sort_keys=True))
        return 0

    try:
        config = EngineConfig.from_params(load_params(ns.params, ns.params_file))
        configure_logging(config.log_level)

        bot = StrategicRiftBot(config)
        bot.read_init()
        while True:
            try:
                bot.read_turn()
            except EOFError:
                break
            for line in bot.get_action():
                print(line)
            sys.stdout.flush()
    except RiftError as e:
        report_and_exit(e)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
