"""Roster, catalogue and season table models."""
from typing import Dict, List
from pydantic import BaseModel, Field, field_validator

from injurylog.schemas.log import DEFAULT_STATUS, check_free_text

BUILTIN_STATUSES = [DEFAULT_STATUS, "Modified", "Unavailable"]


class AppConfig(BaseModel):
    """Configuration built from the roster/config CSV."""

    athletes: List[str] = Field(default_factory=list)
    injury_sites: List[str] = Field(default_factory=list, alias="injurySites")
    injuries: List[str] = Field(default_factory=list)
    severities: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)
    status_colors: Dict[str, str] = Field(default_factory=dict, alias="statusColors")

    model_config = {"populate_by_name": True}

    def recognized_statuses(self) -> List[str]:
        """Status catalogue plus the implicit default."""
        statuses = self.statuses or BUILTIN_STATUSES
        if DEFAULT_STATUS in statuses:
            return list(statuses)
        return [DEFAULT_STATUS, *statuses]


class SeasonBoundary(BaseModel):
    """A labelled date range (a season or a round within one)."""

    label: str
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")

    model_config = {"populate_by_name": True}

    @field_validator("label", "start_date", "end_date")
    @classmethod
    def _no_separators(cls, value: str) -> str:
        return check_free_text(value)


class AthleteRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        value = check_free_text(value).strip()
        if not value or value == "-":
            raise ValueError("athlete name must not be empty")
        return value
