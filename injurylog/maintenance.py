"""
Operations that change the stored log, roster and season tables.

Every operation takes an explicit LogContext and commits through its
UpdateCoordinator, so a concurrent writer causes a re-read and re-apply
rather than a lost update.
"""
from datetime import date, timedelta
from typing import Iterable, List, NamedTuple, Tuple

from injurylog.context import LogContext
from injurylog.engine.carry_forward import project
from injurylog.schemas.log import LogKey, StatusRecord
from injurylog.schemas.roster import SeasonBoundary
from injurylog.storage.codec import StatusLog
from injurylog.storage.coordinator import CommitResult
from injurylog.storage.roster import add_athlete_row, config_codec, remove_athlete_row
from injurylog.storage.season import season_codec
from injurylog.app_logging import get_logger

logger = get_logger(__name__)


class CarryForwardResult(NamedTuple):
    target_date: date
    added: List[str]
    changed: bool


def update_record(ctx: LogContext, key: str, record: StatusRecord) -> CommitResult:
    """Set the record stored under a single key."""
    record = StatusRecord.coerce(record)

    def mutate(log: StatusLog) -> StatusLog:
        return {**log, key: record}

    logger.info(f"Updating {key} to {record.status}")
    return ctx.coordinator.commit(ctx.log_path, mutate, message=f"Update {key}")


def backfill(ctx: LogContext, entries: Iterable[Tuple[str, StatusRecord]]) -> CommitResult:
    """Merge several key/record pairs into the log in one commit."""
    entries = [(key, StatusRecord.coerce(record)) for key, record in entries]

    def mutate(log: StatusLog) -> StatusLog:
        merged = dict(log)
        for key, record in entries:
            merged[key] = record
        return merged

    logger.info(f"Back-filling {len(entries)} log entries")
    return ctx.coordinator.commit(ctx.log_path, mutate, message=f"Back-fill {len(entries)} entries")


def prune_athlete(log: StatusLog, athlete: str) -> StatusLog:
    """Copy of ``log`` without any entry whose key belongs to ``athlete``."""
    kept = {}
    for key, record in log.items():
        parsed = LogKey.parse(key)
        if parsed is not None and parsed.athlete == athlete:
            continue
        kept[key] = record
    return kept


def add_athlete(ctx: LogContext, name: str) -> CommitResult:
    """Add an athlete to the roster. The log is not touched."""
    decode, encode = config_codec(ctx.config_path)
    logger.info(f"Adding athlete {name}")
    return ctx.coordinator.commit(
        ctx.config_path,
        lambda table: add_athlete_row(table, name),
        message=f"Add athlete {name}",
        decode=decode,
        encode=encode,
    )


def remove_athlete(ctx: LogContext, name: str) -> Tuple[CommitResult, CommitResult]:
    """Remove an athlete from the roster, then delete their log history."""
    decode, encode = config_codec(ctx.config_path)
    logger.info(f"Removing athlete {name}")
    roster_result = ctx.coordinator.commit(
        ctx.config_path,
        lambda table: remove_athlete_row(table, name),
        message=f"Remove athlete {name}",
        decode=decode,
        encode=encode,
    )
    log_result = ctx.coordinator.commit(
        ctx.log_path,
        lambda log: prune_athlete(log, name),
        message=f"Remove log history for {name}",
    )
    return roster_result, log_result


def carry_forward(ctx: LogContext, as_of: date) -> CarryForwardResult:
    """Fill in the day after ``as_of`` for the whole roster."""
    roster = ctx.roster.list()
    target = as_of + timedelta(days=1)
    added: List[str] = []

    def mutate(log: StatusLog) -> StatusLog:
        updated, _ = project(log, roster, as_of)
        added[:] = [key for key in updated if key not in log]
        return updated

    result = ctx.coordinator.commit(
        ctx.log_path,
        mutate,
        message=f"Automated nightly update for {target.isoformat()} [skip ci]",
    )
    if not result.changed:
        logger.info("No updates needed. Tomorrow's log is already populated.")
        return CarryForwardResult(target, [], False)
    return CarryForwardResult(target, list(added), True)


def update_season_table(ctx: LogContext, kind: str, rows: List[SeasonBoundary]) -> CommitResult:
    """Replace the season ``dates`` or ``rounds`` table."""
    decode, encode = season_codec(kind)
    path = ctx.season_path(kind)
    rows = list(rows)
    logger.info(f"Replacing season {kind} table with {len(rows)} rows")
    return ctx.coordinator.commit(
        path,
        lambda current: rows,
        message=f"Update season {kind}",
        decode=decode,
        encode=encode,
    )
