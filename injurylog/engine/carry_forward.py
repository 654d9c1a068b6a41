"""
Carry-forward of athlete status.

The log is sparse: an athlete's state is assumed constant until the next
explicit change. Each run fills in the day after ``as_of`` for every athlete
on the roster by copying the most recent record on or before ``as_of``.
"""
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Tuple

from injurylog.schemas.log import StatusRecord, make_key
from injurylog.storage.codec import StatusLog
from injurylog.app_logging import get_logger

logger = get_logger(__name__)

# Days searched backwards, counting from the day being filled in
LOOKBACK_DAYS = 365


def find_latest(
    log: Mapping[str, StatusRecord],
    athlete: str,
    day: date,
    window: int = LOOKBACK_DAYS,
) -> Optional[StatusRecord]:
    """Most recent record for ``athlete`` in ``[day - window + 1, day]``."""
    for offset in range(window):
        record = log.get(make_key(athlete, day - timedelta(days=offset)))
        if record is not None:
            return record
    return None


def project(
    log: Mapping[str, StatusRecord],
    roster: Iterable[str],
    as_of: date,
) -> Tuple[StatusLog, bool]:
    """Fill in ``as_of + 1`` for every athlete that has no entry for it.

    Returns a new mapping and whether any key was added; ``log`` itself is
    left untouched. Existing entries for the target day are never replaced,
    so running twice for the same date is a no-op the second time.
    """
    target = as_of + timedelta(days=1)
    updated: StatusLog = dict(log)
    changed = False

    for athlete in roster:
        target_key = make_key(athlete, target)
        if target_key in updated:
            continue

        record = find_latest(log, athlete, as_of)
        if record is None:
            record = StatusRecord.default()

        logger.info(f"Updating {athlete} for {target.isoformat()} with status: {record.status}")
        updated[target_key] = record
        changed = True

    return updated, changed


def resolve_status(log: Mapping[str, StatusRecord], athlete: str, day: date) -> StatusRecord:
    """Status of ``athlete`` on ``day`` as the sparse log implies it."""
    record = find_latest(log, athlete, day, LOOKBACK_DAYS + 1)
    return record if record is not None else StatusRecord.default()
