"""Status log data model."""
from datetime import date
from typing import NamedTuple, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_STATUS = "Available"
FIELD_SEPARATOR = ","
DATE_LENGTH = len("YYYY-MM-DD")


def check_free_text(value: str) -> str:
    """Reject characters the unescaped log format cannot carry."""
    if FIELD_SEPARATOR in value or "\n" in value or "\r" in value:
        raise ValueError("commas and line breaks are not allowed")
    return value


class StatusRecord(BaseModel):
    """One athlete's state on one day."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: str = ""
    injury_site: str = Field(default="", alias="injurySite")
    injury: str = ""
    severity: str = ""
    comment: str = ""

    @classmethod
    def default(cls) -> "StatusRecord":
        return cls(status=DEFAULT_STATUS)

    @classmethod
    def coerce(cls, record: "StatusRecord") -> "StatusRecord":
        """Drop subclass identity so records compare equal by value."""
        if type(record) is cls:
            return record
        return cls.model_validate(record.model_dump())

    def as_row(self) -> list[str]:
        return [self.status, self.injury_site, self.injury, self.severity, self.comment]


class ValidatedStatusRecord(StatusRecord):
    """Status record accepted from a client; rejects values the log cannot store."""

    status: str = DEFAULT_STATUS

    @field_validator("status", "injury_site", "injury", "severity", "comment")
    @classmethod
    def _no_separators(cls, value: str) -> str:
        return check_free_text(value)


class LogKey(NamedTuple):
    """Composite ``athlete-YYYY-MM-DD`` key."""

    athlete: str
    day: date

    def __str__(self) -> str:
        return f"{self.athlete}-{self.day.isoformat()}"

    @classmethod
    def parse(cls, key: str) -> Optional["LogKey"]:
        """Split a key into athlete and date.

        The date is always the trailing ten characters, so athlete names that
        contain ``-`` still decompose exactly. Returns None for keys that do
        not end in ``-YYYY-MM-DD`` or have an empty athlete.
        """
        if len(key) < DATE_LENGTH + 2 or key[-DATE_LENGTH - 1] != "-":
            return None
        athlete = key[:-DATE_LENGTH - 1]
        try:
            day = date.fromisoformat(key[-DATE_LENGTH:])
        except ValueError:
            return None
        # fromisoformat also takes week dates such as 2024-W01-1
        if not athlete or day.isoformat() != key[-DATE_LENGTH:]:
            return None
        return cls(athlete, day)


def make_key(athlete: str, day: date) -> str:
    return str(LogKey(athlete, day))


class LogEntry(BaseModel):
    """A key and the record stored under it."""

    key: str
    record: ValidatedStatusRecord

    @field_validator("key")
    @classmethod
    def _key_decomposes(cls, value: str) -> str:
        check_free_text(value)
        if LogKey.parse(value) is None:
            raise ValueError("key must look like '<athlete>-YYYY-MM-DD'")
        return value
