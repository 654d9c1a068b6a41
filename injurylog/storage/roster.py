"""
Roster/config file parsing.

The config CSV is column-oriented: every column is an independent catalogue
read top to bottom, blanks skipped. ``status`` and ``statusColor`` are paired
by row. Athlete names live in the ``athlete`` column (or the first column of
files that do not name one).

The config may also be an HTML page that embeds the CSV as
``const csvText = `...`;``. Such pages are read and written in place: only the
embedded block changes.
"""
import io
import re
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

import pandas as pd

from injurylog.adapters.base import StorageAdapter
from injurylog.errors import NotFoundError, StorageError
from injurylog.schemas.roster import AppConfig
from injurylog.app_logging import get_logger

logger = get_logger(__name__)

ATHLETE_COLUMN = "athlete"
CONFIG_COLUMNS = [ATHLETE_COLUMN, "injurySite", "injury", "severity", "status", "statusColor"]
EMBEDDED_CSV = re.compile(r"const csvText = `([^`]+)`;")


class ConfigTable(NamedTuple):
    """Rows of the config CSV, every value a string.

    ``page`` holds the surrounding HTML when the CSV was embedded in one.
    """

    columns: List[str]
    rows: List[Dict[str, str]]
    page: Optional[str] = None

    @property
    def athlete_column(self) -> str:
        if ATHLETE_COLUMN in self.columns or not self.columns:
            return ATHLETE_COLUMN
        return self.columns[0]


def extract_embedded_csv(html: str) -> str:
    """Pull the roster CSV out of a page that embeds it as ``const csvText``."""
    match = EMBEDDED_CSV.search(html)
    if not match:
        raise StorageError("Could not find embedded CSV in page")
    return match.group(1)


def embed_csv(html: str, csv_text: str) -> str:
    """Replace the embedded ``const csvText`` block of ``html`` with ``csv_text``."""
    if "`" in csv_text:
        raise StorageError("Roster values cannot contain backticks when embedded in a page")
    extract_embedded_csv(html)
    return EMBEDDED_CSV.sub(lambda match: f"const csvText = `{csv_text}`;", html, count=1)


def read_csv_text(raw: str | bytes | None) -> pd.DataFrame:
    """Read CSV text into an all-string frame; empty input gives an empty frame."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8-sig")
    if not raw or not raw.strip():
        return pd.DataFrame()
    try:
        df = pd.read_csv(io.StringIO(raw), dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.ParserError as e:
        raise StorageError(f"Malformed CSV: {e}") from e
    df.columns = [str(column).strip() for column in df.columns]
    return df.fillna("")


def decode_config(raw: str | bytes | None) -> ConfigTable:
    df = read_csv_text(raw)
    columns = list(df.columns) or [ATHLETE_COLUMN]
    for column in CONFIG_COLUMNS[1:]:
        if column not in columns:
            columns.append(column)
    rows = [
        {column: str(record.get(column, "")).strip() for column in columns}
        for record in df.to_dict("records")
    ]
    return ConfigTable(columns, rows)


def encode_config(table: ConfigTable) -> str:
    df = pd.DataFrame(table.rows, columns=table.columns).fillna("")
    return df.to_csv(index=False, lineterminator="\n")


def decode_page_config(raw: str | bytes | None) -> ConfigTable:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not raw or not raw.strip():
        return decode_config("")
    return decode_config(extract_embedded_csv(raw))._replace(page=raw)


def encode_page_config(table: ConfigTable) -> str:
    if table.page is None:
        raise StorageError("No page to embed the roster in")
    return embed_csv(table.page, encode_config(table))


def config_codec(path: str) -> Tuple[Callable, Callable]:
    """Decode/encode pair for a config stored at ``path``."""
    if path.endswith(".html"):
        return decode_page_config, encode_page_config
    return decode_config, encode_config


def _catalogue(rows: List[Dict[str, str]], column: str) -> List[str]:
    values: List[str] = []
    for row in rows:
        value = row.get(column, "").strip()
        if value and value != "-" and value not in values:
            values.append(value)
    return values


def athletes_from_table(table: ConfigTable) -> List[str]:
    """Unique athlete names in file order."""
    return _catalogue(table.rows, table.athlete_column)


def parse_app_config(table: ConfigTable) -> AppConfig:
    status_colors = {}
    for row in table.rows:
        status = row.get("status", "").strip()
        color = row.get("statusColor", "").strip()
        if status and color:
            status_colors.setdefault(status, color)

    return AppConfig(
        athletes=athletes_from_table(table),
        injury_sites=_catalogue(table.rows, "injurySite"),
        injuries=_catalogue(table.rows, "injury"),
        severities=_catalogue(table.rows, "severity"),
        statuses=_catalogue(table.rows, "status"),
        status_colors=status_colors,
    )


def add_athlete_row(table: ConfigTable, name: str) -> ConfigTable:
    """Append a roster row for ``name`` with empty attributes."""
    if name in athletes_from_table(table):
        return table
    row = {column: "" for column in table.columns}
    row[table.athlete_column] = name
    return table._replace(rows=[*table.rows, row])


def remove_athlete_row(table: ConfigTable, name: str) -> ConfigTable:
    """Drop ``name`` from the roster.

    Rows that also carry catalogue values keep them; only the athlete cell is
    cleared. Rows left completely empty are removed.
    """
    column = table.athlete_column
    rows = []
    for row in table.rows:
        if row.get(column, "").strip() == name:
            row = {**row, column: ""}
            if not any(value.strip() for value in row.values()):
                continue
        rows.append(row)
    return table._replace(rows=rows)


class RosterProvider:
    """Supplies the current athlete list from the stored config file."""

    def __init__(self, adapter: StorageAdapter, path: str):
        self.adapter = adapter
        self.path = path

    def load(self) -> ConfigTable:
        try:
            blob = self.adapter.get(self.path)
        except NotFoundError:
            logger.info(f"{self.path} not found, roster is empty")
            return decode_config("")
        decode, _ = config_codec(self.path)
        return decode(blob.content)

    def list(self) -> List[str]:
        athletes = athletes_from_table(self.load())
        logger.info(f"Found {len(athletes)} athletes")
        return athletes

    def config(self) -> AppConfig:
        return parse_app_config(self.load())
