# ==============================================================
# readings.py — sensor readings and CSV ingestion
# ==============================================================

from __future__ import annotations
import io
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Union

import pandas as pd

from config import CSV_COLUMNS, FEATURES, INGEST_BOUNDS

logger = logging.getLogger(__name__)

TimeLabel = Union[str, int, float]


@dataclass(frozen=True)
class Reading:
    time: TimeLabel
    location: str
    water_temperature: float
    salinity: float
    ph_level: float
    dissolved_oxygen: float
    turbidity: float
    nitrate: float


@dataclass(frozen=True)
class ForecastedReading(Reading):
    is_prediction: bool = True
    is_suitable: Optional[bool] = None
    suitability_index: Optional[int] = None


# ---------------------------------------------------------------
# CSV ingestion
# ---------------------------------------------------------------
def _skip_bad_line(fields: List[str]):
    logger.warning("Skipping malformed entry (%d fields): %s", len(fields), ",".join(fields))
    return None


def _row_problem(values: dict) -> Optional[str]:
    for name in FEATURES:
        v = values[name]
        if v is None or not math.isfinite(v):
            return f"{name} is missing or not a number"
        lo, hi = INGEST_BOUNDS[name]
        if v < lo or v > hi:
            return f"{name}={v} outside physical range [{lo}, {hi}]"
    return None


def parse_csv(text: str) -> List[Reading]:
    """Parse the logger's comma-separated export into Readings.

    The first non-blank line is the header. Rows with the wrong number of
    fields, an empty date or location, or values that are not finite numbers
    inside their physical range are logged and dropped.
    """
    if not text or not text.strip():
        return []

    df = pd.read_csv(
        io.StringIO(text.strip()),
        dtype=str,
        skipinitialspace=True,
        skip_blank_lines=True,
        keep_default_na=False,
        engine="python",
        on_bad_lines=_skip_bad_line,
    )
    df = df.fillna("")
    if df.empty:
        logger.warning("No data rows found after header")
        return []

    header = [str(c).strip().lower() for c in df.columns]
    if len(header) != len(CSV_COLUMNS) or not all(e in h for h, e in zip(header, CSV_COLUMNS)):
        logger.warning("CSV header does not match expected %s, got %s", CSV_COLUMNS, header)
    if len(header) != len(CSV_COLUMNS):
        logger.warning("Expected %d columns, got %d; nothing parsed", len(CSV_COLUMNS), len(header))
        return []

    df.columns = ["time", "location"] + FEATURES
    df = df.apply(lambda col: col.str.strip())
    numeric = df[FEATURES].apply(pd.to_numeric, errors="coerce")

    readings: List[Reading] = []
    for i, (row, nums) in enumerate(zip(df.itertuples(index=False), numeric.itertuples(index=False))):
        line_no = i + 2
        values = {name: (None if pd.isna(v) else float(v)) for name, v in zip(FEATURES, nums)}
        if not row.time or not row.location:
            logger.warning("Skipping entry without date or location (line %d)", line_no)
            continue
        problem = _row_problem(values)
        if problem:
            logger.warning("Skipping entry (line %d): %s", line_no, problem)
            continue
        readings.append(Reading(time=row.time, location=row.location, **values))

    logger.info("Parsed %d readings", len(readings))
    return readings
