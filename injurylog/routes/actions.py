"""Single-endpoint action surface: ``{"action": ..., "payload": {...}}``."""
from typing import Any, Callable, Dict
from fastapi import APIRouter, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError

from injurylog.context import LogContext
from injurylog.deps import get_context, verify_editor
from injurylog.routes.config import SeasonTableRequest, apply_add_athlete, apply_remove_athlete, apply_season_table
from injurylog.routes.log import BatchRequest, CarryForwardRequest, apply_batch, apply_carry_forward, apply_record_update
from injurylog.schemas.log import LogEntry
from injurylog.schemas.roster import AthleteRequest
from injurylog.app_logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class ActionRequest(BaseModel):
    action: str
    payload: Dict[str, Any] = Field(default_factory=dict)


def _add_athlete(ctx: LogContext, payload: Dict[str, Any]):
    return apply_add_athlete(ctx, AthleteRequest.model_validate(payload))


def _remove_athlete(ctx: LogContext, payload: Dict[str, Any]):
    return apply_remove_athlete(ctx, AthleteRequest.model_validate(payload).name)


def _update_record(ctx: LogContext, payload: Dict[str, Any]):
    entry = LogEntry.model_validate(payload)
    return apply_record_update(ctx, entry.key, entry.record)


def _batch_update(ctx: LogContext, payload: Dict[str, Any]):
    return apply_batch(ctx, BatchRequest.model_validate(payload))


def _carry_forward(ctx: LogContext, payload: Dict[str, Any]):
    return apply_carry_forward(ctx, CarryForwardRequest.model_validate(payload))


def _season_table(kind: str) -> Callable[[LogContext, Dict[str, Any]], Dict[str, Any]]:
    def handler(ctx: LogContext, payload: Dict[str, Any]):
        return apply_season_table(ctx, kind, SeasonTableRequest.model_validate(payload))
    return handler


ACTIONS: Dict[str, Callable[[LogContext, Dict[str, Any]], Dict[str, Any]]] = {
    "addAthlete": _add_athlete,
    "removeAthlete": _remove_athlete,
    "updateRecord": _update_record,
    "batchUpdate": _batch_update,
    "carryForward": _carry_forward,
    "updateSeasonDates": _season_table("dates"),
    "updateSeasonRounds": _season_table("rounds"),
}


@router.post("/")
def post_action(
    request: ActionRequest,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Dispatch a named write action."""
    handler = ACTIONS.get(request.action)
    if handler is None:
        raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")

    logger.info(f"{editor} requested action {request.action}")
    try:
        result = handler(ctx, request.payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return {"action": request.action, **result}
