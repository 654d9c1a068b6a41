"""Nightly carry-forward job."""
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from injurylog.config import settings
from injurylog.context import LogContext
from injurylog.errors import InjuryLogError
from injurylog.maintenance import carry_forward
from injurylog.app_logging import get_logger

logger = get_logger(__name__)


def today() -> date:
    """Current date in the configured timezone."""
    return datetime.now(ZoneInfo(settings.TZ)).date()


def job_carry_forward(as_of: Optional[str] = None, ctx: Optional[LogContext] = None) -> dict:
    """Populate tomorrow's log entries for every athlete on the roster."""
    day = date.fromisoformat(as_of) if as_of else today()
    logger.info(f"Starting nightly injury log update as of {day.isoformat()}")

    results = {
        'as_of': day.isoformat(),
        'target_date': None,
        'entries_added': 0,
        'changed': False,
        'errors': [],
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }

    try:
        ctx = ctx or LogContext.from_settings()
        outcome = carry_forward(ctx, day)
        results['target_date'] = outcome.target_date.isoformat()
        results['entries_added'] = len(outcome.added)
        results['changed'] = outcome.changed
    except InjuryLogError as e:
        logger.error(f"Carry-forward error: {e}")
        results['errors'].append(str(e))

    logger.info(f"Carry-forward complete: {results}")
    return results
