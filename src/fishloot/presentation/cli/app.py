"""Operator commands: probability reports and seeded draw simulations."""
from __future__ import annotations

import argparse
import logging
import secrets
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

from fishloot.config import get_default_settings_path, load_settings
from fishloot.core.rng import RNG
from fishloot.data.errors import DataError
from fishloot.domain.context import LootContext
from fishloot.presentation.cli.render import (
    debug_enabled,
    render_group_probabilities,
    render_simulation,
)
from fishloot.services import GroupProbabilityCalculator, LootService, NoEligibleLootError

_MAX_RANDOM_SEED = 2**31 - 1


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run one command and return the exit code."""
    args = _build_parser().parse_args(argv)
    settings_path = args.settings
    if settings_path is None:
        settings_path = (
            Path(args.definitions) / "settings.json" if args.definitions else get_default_settings_path()
        )
    settings = load_settings(settings_path)
    logging.basicConfig(
        level="DEBUG" if debug_enabled() else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    seed = settings.seed if settings.seed is not None else secrets.randbelow(_MAX_RANDOM_SEED)
    try:
        service = LootService.from_definitions(RNG(seed), base_path=args.definitions)
    except DataError as exc:
        print(f"Could not load loot definitions: {exc}", file=sys.stderr)
        return 1

    if args.command == "probabilities":
        calculator = GroupProbabilityCalculator(
            service.current_generation,
            fallback_weight=settings.analysis_fallback_weight,
        )
        service.add_reload_hook(calculator.clear_cache)
        lines = render_group_probabilities(
            args.loot_id, calculator.calculate_group_probabilities(args.loot_id)
        )
    else:
        context = LootContext(args=_parse_context_args(args.arg))
        counts: Counter[str] = Counter()
        misses = 0
        for _ in range(args.draws):
            try:
                counts[service.get_next_loot(None, context).id] += 1
            except NoEligibleLootError:
                misses += 1
        lines = render_simulation(counts, args.draws, misses)

    for line in lines:
        print(line)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fishloot", description="Inspect weighted loot tables.")
    parser.add_argument("--definitions", type=Path, default=None, help="Directory holding loots.json and loot_conditions.json.")
    parser.add_argument("--settings", type=Path, default=None, help="Settings file (defaults to settings.json beside the definitions).")
    commands = parser.add_subparsers(dest="command", required=True)

    probabilities = commands.add_parser("probabilities", help="Show a loot's chance in every group.")
    probabilities.add_argument("loot_id")

    simulate = commands.add_parser("simulate", help="Draw loots and report observed frequencies.")
    simulate.add_argument("--draws", type=_positive_int, default=1000)
    simulate.add_argument("--arg", action="append", default=[], metavar="KEY=VALUE", help="Context argument; repeatable.")
    return parser


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value


def _parse_context_args(pairs: List[str]) -> Dict[str, object]:
    values: Dict[str, object] = {}
    for pair in pairs:
        key, separator, raw = pair.partition("=")
        if not separator or not key:
            raise SystemExit(f"Invalid --arg {pair!r}; expected KEY=VALUE.")
        values[key] = _coerce(raw)
    return values


def _coerce(raw: str) -> object:
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw
