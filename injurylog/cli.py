#!/usr/bin/env python3
"""
Command-line entry point for the injury log.

    injurylog carry-forward [--as-of 2024-01-01]
    injurylog show [--date 2024-01-02]
    injurylog backfill entries.csv
"""
import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from injurylog.context import LogContext
from injurylog.engine.carry_forward import resolve_status
from injurylog.errors import InjuryLogError
from injurylog.jobs.nightly import today
from injurylog.maintenance import backfill, carry_forward
from injurylog.storage.codec import decode_log
from injurylog.app_logging import setup_logging, get_logger

logger = get_logger(__name__)


def cmd_carry_forward(ctx: LogContext, args: argparse.Namespace) -> int:
    as_of = args.as_of or today()
    outcome = carry_forward(ctx, as_of)
    if outcome.changed:
        print(f"Added {len(outcome.added)} entries for {outcome.target_date.isoformat()}")
    else:
        print(f"No updates needed for {outcome.target_date.isoformat()}")
    return 0


def cmd_show(ctx: LogContext, args: argparse.Namespace) -> int:
    day = args.date or today()
    log = ctx.coordinator.read(ctx.log_path).data
    rows = []
    for athlete in ctx.roster.list():
        record = resolve_status(log, athlete, day)
        rows.append([athlete, record.status, record.injury_site, record.injury, record.severity, record.comment])
    print(f"Status on {day.isoformat()}")
    print(tabulate(rows, headers=["Athlete", "Status", "Site", "Injury", "Severity", "Comment"], tablefmt="grid"))
    return 0


def cmd_backfill(ctx: LogContext, args: argparse.Namespace) -> int:
    entries = decode_log(Path(args.file).read_text(encoding="utf-8"))
    if not entries:
        print(f"No entries found in {args.file}")
        return 1
    result = backfill(ctx, entries.items())
    print(f"Merged {len(entries)} entries ({'changed' if result.changed else 'no changes'})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="injurylog", description="Athlete injury log maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    carry = subparsers.add_parser("carry-forward", help="Populate tomorrow's entries for every athlete")
    carry.add_argument("--as-of", type=date.fromisoformat, default=None, help="Day to carry forward from (YYYY-MM-DD)")
    carry.set_defaults(func=cmd_carry_forward)

    show = subparsers.add_parser("show", help="Print every athlete's status on a day")
    show.add_argument("--date", type=date.fromisoformat, default=None, help="Day to show (YYYY-MM-DD)")
    show.set_defaults(func=cmd_show)

    fill = subparsers.add_parser("backfill", help="Merge entries from a CSV file in log format")
    fill.add_argument("file", help="CSV with header key,status,injurySite,injury,severity,comment")
    fill.set_defaults(func=cmd_backfill)

    return parser


def main(argv: Optional[List[str]] = None, ctx: Optional[LogContext] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        ctx = ctx or LogContext.from_settings()
        return args.func(ctx, args)
    except (InjuryLogError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
