"""Injury log CSV codec.

The log file is a plain comma-delimited table with no quoting:

    key,status,injurySite,injury,severity,comment
    Alice-2024-01-01,Injured,Knee,ACL,High,

Fields are never escaped, so values containing commas or line breaks cannot
be stored. ``encode_log`` refuses them instead of writing a corrupt row.
"""
from typing import Dict, Mapping

from injurylog.errors import LogFormatError
from injurylog.schemas.log import StatusRecord, FIELD_SEPARATOR

LOG_COLUMNS = ["key", "status", "injurySite", "injury", "severity", "comment"]
LOG_HEADER = FIELD_SEPARATOR.join(LOG_COLUMNS)

StatusLog = Dict[str, StatusRecord]


def _to_text(raw: str | bytes | None) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8-sig")
    return raw


def decode_log(raw: str | bytes | None) -> StatusLog:
    """Parse log CSV into an ordered key -> record mapping."""
    lines = [line.rstrip("\r") for line in _to_text(raw).split("\n")]
    lines = [line for line in lines if line.strip()]
    if len(lines) <= 1:
        return {}

    log: StatusLog = {}
    for line in lines[1:]:
        fields = line.split(FIELD_SEPARATOR)[:len(LOG_COLUMNS)]
        fields += [""] * (len(LOG_COLUMNS) - len(fields))
        key, status, injury_site, injury, severity, comment = fields
        if not key:
            continue
        log[key] = StatusRecord(
            status=status,
            injury_site=injury_site,
            injury=injury,
            severity=severity,
            comment=comment,
        )
    return log


def encode_log(log: Mapping[str, StatusRecord]) -> str:
    """Serialize a mapping back to log CSV, in mapping order."""
    rows = [LOG_HEADER]
    for key, record in log.items():
        fields = [key, *record.as_row()]
        for value in fields:
            if FIELD_SEPARATOR in value or "\n" in value or "\r" in value:
                raise LogFormatError(f"Value {value!r} for {key!r} cannot be stored in the log")
        rows.append(FIELD_SEPARATOR.join(fields))
    return "\n".join(rows)
