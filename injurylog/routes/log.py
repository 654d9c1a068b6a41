"""Injury log API routes."""
from datetime import date
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from injurylog.config import settings
from injurylog.context import LogContext
from injurylog.deps import get_context, verify_editor, verify_user
from injurylog.engine.carry_forward import resolve_status
from injurylog.jobs.nightly import job_carry_forward, today
from injurylog.maintenance import backfill, carry_forward, update_record
from injurylog.schemas.log import LogEntry, LogKey, StatusRecord, ValidatedStatusRecord, make_key
from injurylog.storage.coordinator import CommitResult
from injurylog.app_logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class BatchRequest(BaseModel):
    entries: List[LogEntry] = Field(..., min_length=1)


class CarryForwardRequest(BaseModel):
    as_of: Optional[date] = Field(default=None, alias="asOf")

    model_config = {"populate_by_name": True}


def commit_summary(result: CommitResult) -> Dict[str, Any]:
    return {
        "changed": result.changed,
        "version": result.version,
        "attempts": result.attempts,
    }


def check_statuses(ctx: LogContext, records: List[StatusRecord]) -> None:
    """Reject statuses missing from the configured catalogue."""
    recognized = ctx.roster.config().recognized_statuses()
    unknown = sorted({record.status for record in records if record.status not in recognized})
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown status: {', '.join(unknown)}. Expected one of: {', '.join(recognized)}",
        )


def apply_record_update(ctx: LogContext, key: str, record: ValidatedStatusRecord) -> Dict[str, Any]:
    if LogKey.parse(key) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid key {key!r}, expected '<athlete>-YYYY-MM-DD'",
        )
    check_statuses(ctx, [record])
    result = update_record(ctx, key, record)
    return {"key": key, **commit_summary(result)}


def apply_batch(ctx: LogContext, request: BatchRequest) -> Dict[str, Any]:
    check_statuses(ctx, [entry.record for entry in request.entries])
    result = backfill(ctx, [(entry.key, entry.record) for entry in request.entries])
    return {"entries": len(request.entries), **commit_summary(result)}


def apply_carry_forward(ctx: LogContext, request: CarryForwardRequest) -> Dict[str, Any]:
    as_of = request.as_of or today()

    if settings.REDIS_URL:
        from injurylog.jobs.queue import enqueue_job

        job = enqueue_job(job_carry_forward, as_of=as_of.isoformat(), job_timeout=300)
        return {"message": "Carry-forward job enqueued", "job_id": job.id, "as_of": as_of.isoformat()}

    outcome = carry_forward(ctx, as_of)
    return {
        "as_of": as_of.isoformat(),
        "target_date": outcome.target_date.isoformat(),
        "added": outcome.added,
        "changed": outcome.changed,
    }


@router.get("/")
def get_log(
    ctx: LogContext = Depends(get_context),
    user: str = Depends(verify_user),
):
    """Full injury log."""
    snapshot = ctx.coordinator.read(ctx.log_path)
    return {
        "version": snapshot.version,
        "log": {key: record.model_dump(by_alias=True) for key, record in snapshot.data.items()},
    }


@router.get("/status")
def get_status(
    athlete: str = Query(..., description="Athlete name"),
    day: Optional[date] = Query(None, alias="date", description="Date, defaults to today"),
    ctx: LogContext = Depends(get_context),
    user: str = Depends(verify_user),
):
    """Status of one athlete on one day, resolved through carry-forward."""
    day = day or today()
    log = ctx.coordinator.read(ctx.log_path).data
    key = make_key(athlete, day)
    record = resolve_status(log, athlete, day)
    return {
        "athlete": athlete,
        "date": day.isoformat(),
        "recorded": key in log,
        "record": record.model_dump(by_alias=True),
    }


@router.put("/records/{key}")
def put_record(
    key: str,
    record: ValidatedStatusRecord,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Set the record for one athlete on one day."""
    logger.info(f"{editor} updating {key}")
    return apply_record_update(ctx, key, record)


@router.post("/batch")
def post_batch(
    request: BatchRequest,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Merge several records into the log in one commit."""
    logger.info(f"{editor} back-filling {len(request.entries)} entries")
    return apply_batch(ctx, request)


@router.post("/carry-forward")
def post_carry_forward(
    request: CarryForwardRequest,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Populate the next day for every athlete."""
    logger.info(f"{editor} triggered carry-forward")
    return apply_carry_forward(ctx, request)


@router.get("/jobs/{job_id}")
def get_carry_forward_job(job_id: str, user: str = Depends(verify_user)):
    """Get status of an enqueued carry-forward job."""
    if not settings.REDIS_URL:
        raise HTTPException(status_code=404, detail="Job queue is not configured")

    from injurylog.jobs.queue import get_job_status

    job_status = get_job_status(job_id)
    if not job_status:
        raise HTTPException(status_code=404, detail="Job not found")
    return job_status
