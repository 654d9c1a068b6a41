"""Roster configuration and season table routes."""
from typing import Any, Dict, List, Literal
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from injurylog.context import LogContext
from injurylog.deps import get_context, verify_editor, verify_user
from injurylog.maintenance import add_athlete, remove_athlete, update_season_table
from injurylog.routes.log import commit_summary
from injurylog.schemas.roster import AthleteRequest, SeasonBoundary
from injurylog.storage.season import season_codec
from injurylog.app_logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

SeasonKind = Literal["dates", "rounds"]


class SeasonTableRequest(BaseModel):
    rows: List[SeasonBoundary]


def read_season_table(ctx: LogContext, kind: str) -> List[Dict[str, str]]:
    decode, _ = season_codec(kind)
    rows = ctx.coordinator.read(ctx.season_path(kind), decode).data
    return [row.model_dump(by_alias=True) for row in rows]


def apply_add_athlete(ctx: LogContext, request: AthleteRequest) -> Dict[str, Any]:
    result = add_athlete(ctx, request.name)
    return {"athlete": request.name, **commit_summary(result)}


def apply_remove_athlete(ctx: LogContext, name: str) -> Dict[str, Any]:
    roster_result, log_result = remove_athlete(ctx, name)
    return {
        "athlete": name,
        "roster": commit_summary(roster_result),
        "log": commit_summary(log_result),
    }


def apply_season_table(ctx: LogContext, kind: str, request: SeasonTableRequest) -> Dict[str, Any]:
    result = update_season_table(ctx, kind, request.rows)
    return {"table": kind, "rows": len(request.rows), **commit_summary(result)}


@router.get("/")
def get_config(
    ctx: LogContext = Depends(get_context),
    user: str = Depends(verify_user),
):
    """Roster, catalogues and season tables."""
    return {
        "config": ctx.roster.config().model_dump(by_alias=True),
        "seasonDates": read_season_table(ctx, "dates"),
        "seasonRounds": read_season_table(ctx, "rounds"),
    }


@router.post("/athletes", status_code=status.HTTP_201_CREATED)
def post_athlete(
    request: AthleteRequest,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Add an athlete to the roster."""
    logger.info(f"{editor} adding athlete {request.name}")
    return apply_add_athlete(ctx, request)


@router.delete("/athletes/{name}")
def delete_athlete(
    name: str,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Remove an athlete and their log history."""
    logger.info(f"{editor} removing athlete {name}")
    return apply_remove_athlete(ctx, name)


@router.put("/season/{kind}")
def put_season_table(
    kind: SeasonKind,
    request: SeasonTableRequest,
    ctx: LogContext = Depends(get_context),
    editor: str = Depends(verify_editor),
):
    """Replace the season dates or season rounds table."""
    logger.info(f"{editor} updating season {kind}")
    return apply_season_table(ctx, kind, request)
