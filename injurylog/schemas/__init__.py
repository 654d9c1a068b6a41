"""Data transfer objects."""
from injurylog.schemas.log import StatusRecord, LogKey, LogEntry, DEFAULT_STATUS
from injurylog.schemas.roster import AppConfig, SeasonBoundary

__all__ = ["StatusRecord", "LogKey", "LogEntry", "DEFAULT_STATUS", "AppConfig", "SeasonBoundary"]
