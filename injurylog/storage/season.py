"""Season boundary tables (season dates and season rounds)."""
from typing import Callable, Dict, List

import pandas as pd

from injurylog.schemas.roster import SeasonBoundary
from injurylog.storage.roster import read_csv_text

SEASON_TABLES: Dict[str, str] = {
    "dates": "season",
    "rounds": "round",
}


def _columns(label_column: str) -> List[str]:
    return [label_column, "startDate", "endDate"]


def decode_season_table(raw: str | bytes | None, label_column: str) -> List[SeasonBoundary]:
    df = read_csv_text(raw)
    if df.empty:
        return []
    if label_column not in df.columns:
        df = df.rename(columns={df.columns[0]: label_column})
    rows = []
    for record in df.to_dict("records"):
        label = str(record.get(label_column, "")).strip()
        if not label:
            continue
        rows.append(SeasonBoundary(
            label=label,
            start_date=str(record.get("startDate", "")).strip(),
            end_date=str(record.get("endDate", "")).strip(),
        ))
    return rows


def encode_season_table(rows: List[SeasonBoundary], label_column: str) -> str:
    df = pd.DataFrame(
        [[row.label, row.start_date, row.end_date] for row in rows],
        columns=_columns(label_column),
    )
    return df.to_csv(index=False, lineterminator="\n")


def season_codec(kind: str) -> tuple[Callable, Callable]:
    """Decode/encode pair for the ``dates`` or ``rounds`` table."""
    if kind not in SEASON_TABLES:
        raise ValueError(f"Unknown season table: {kind}")
    label_column = SEASON_TABLES[kind]
    return (
        lambda raw: decode_season_table(raw, label_column),
        lambda rows: encode_season_table(rows, label_column),
    )
