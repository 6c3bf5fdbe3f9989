"""Command-line interface for proximity_map.

Run:
    python -m proximity_map check --threshold-m 500
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys

from proximity_map.csv_io import load_roster, write_roster_csv
from proximity_map.models import (
    DEFAULT_JITTER_DEGREES,
    DEFAULT_THRESHOLD_M,
    SEED_OTHERS,
    SEED_PRIMARY,
    SessionParams,
)
from proximity_map.roster import Roster


def _build_roster(args: argparse.Namespace) -> Roster:
    params = SessionParams(
        threshold_m=args.threshold_m,
        jitter_degrees=getattr(args, "jitter_degrees", DEFAULT_JITTER_DEGREES),
    )
    if args.csv:
        loaded = load_roster(args.csv)
        return Roster(loaded.primary, loaded.others, params)
    return Roster(SEED_PRIMARY, SEED_OTHERS, params)


def _print_state(roster: Roster) -> None:
    res = roster.proximity
    for e in roster:
        flag = "*" if res.is_in_range(e.id) else " "
        fixed = " (fixed)" if e.is_fixed else ""
        print(f"{flag} {e.id:>4}  {e.name:<20} lat={e.latitude:.4f} lng={e.longitude:.4f}{fixed}")
    if res.alerts:
        for alert in res.alerts:
            print(f"ALERT: {alert}")
    else:
        print("no entities within range")


def _state_payload(roster: Roster) -> dict[str, object]:
    res = roster.proximity
    return {
        "threshold_m": roster.threshold_m,
        "primary_id": roster.primary.id,
        "entities": [
            {
                "id": e.id,
                "name": e.name,
                "latitude": e.latitude,
                "longitude": e.longitude,
                "is_fixed": e.is_fixed,
                "in_range": res.is_in_range(e.id),
            }
            for e in roster
        ],
        "in_range": sorted(res.in_range),
        "alerts": list(res.alerts),
    }


def _cmd_check(args: argparse.Namespace) -> int:
    roster = _build_roster(args)
    if args.json:
        print(json.dumps(_state_payload(roster), ensure_ascii=False, indent=2))
        return 0

    print(f"### threshold={roster.threshold_m:g}m (alert at <= {2 * roster.threshold_m:g}m)")
    _print_state(roster)
    return 0


def _cmd_simulate(args: argparse.Namespace) -> int:
    roster = _build_roster(args)
    rng = random.Random(args.seed)
    targets = [args.entity] if args.entity else [e.id for e in roster]
    for entity_id in targets:
        roster.get(entity_id)  # fail fast on unknown ids

    for step in range(1, args.steps + 1):
        entity_id = rng.choice(targets)
        moved = roster.jitter(entity_id, rng)
        action = "moved" if moved else "is fixed, skipped"
        print(f"### step {step}: {roster.get(entity_id).name} {action}")
        _print_state(roster)
        print()
    return 0


def _cmd_export_seed(args: argparse.Namespace) -> int:
    write_roster_csv((SEED_PRIMARY, *SEED_OTHERS), args.out)
    print(f"exported: {args.out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="proximity_map")
    p.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_roster_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--csv", type=str, default=None, help="roster CSV (default: built-in seed roster)")
        sp.add_argument(
            "--threshold-m",
            type=float,
            default=DEFAULT_THRESHOLD_M,
            help="circle radius in meters; pairs alert at twice this distance",
        )

    p_chk = sub.add_parser("check", help="evaluate proximity for a roster")
    add_roster_args(p_chk)
    p_chk.add_argument("--json", action="store_true", help="print JSON instead of text")
    p_chk.set_defaults(func=_cmd_check)

    p_sim = sub.add_parser("simulate", help="apply random moves and print alerts after each one")
    add_roster_args(p_sim)
    p_sim.add_argument("--steps", type=int, default=10, help="number of moves")
    p_sim.add_argument("--seed", type=int, default=None, help="random seed for reproducible runs")
    p_sim.add_argument("--entity", type=str, default=None, help="only move this entity id")
    p_sim.add_argument(
        "--jitter-degrees",
        type=float,
        default=DEFAULT_JITTER_DEGREES,
        help="max move per axis is half of this value",
    )
    p_sim.set_defaults(func=_cmd_simulate)

    p_exp = sub.add_parser("export-seed", help="write the built-in seed roster to CSV")
    p_exp.add_argument("--out", type=str, default="roster.csv", help="output CSV path")
    p_exp.set_defaults(func=_cmd_export_seed)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except (KeyError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
