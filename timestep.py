# ==============================================================
# timestep.py — sampling interval estimate and future time labels
# ==============================================================

from __future__ import annotations
import logging
import math
from numbers import Real
from typing import List, Optional, Sequence, Union

import pandas as pd

from config import DEFAULT_ORDINAL_STEP, DEFAULT_TIME_STEP
from readings import Reading, TimeLabel

logger = logging.getLogger(__name__)

Step = Union[pd.Timedelta, float]


def _is_ordinal(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _as_ordinal(value) -> Optional[float]:
    """Float for numbers and numeric strings ('1', ' 2.5 '), else None."""
    if _is_ordinal(value):
        return float(value)
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_time(value: TimeLabel):
    """Timestamp for date strings, float for ordinals, None if unparseable."""
    number = _as_ordinal(value)
    if number is not None:
        return number
    ts = pd.to_datetime(str(value), errors="coerce")
    if pd.isna(ts):
        return None
    return ts


def estimate_time_step(history: Sequence[Reading]) -> Step:
    """Mean positive gap between adjacent readings.

    Falls back to one day (or 1.0 for ordinal times) when fewer than two
    usable gaps exist.
    """
    ordinal = bool(history) and _as_ordinal(history[-1].time) is not None
    default = DEFAULT_ORDINAL_STEP if ordinal else pd.Timedelta(DEFAULT_TIME_STEP)

    parsed = []
    for r in history:
        t = parse_time(r.time)
        if t is None or _is_ordinal(t) != ordinal:
            logger.warning("Skipping unparseable timestamp %r", r.time)
            t = None
        parsed.append(t)

    diffs = []
    for prev, cur in zip(parsed, parsed[1:]):
        if prev is None or cur is None:
            continue
        try:
            d = cur - prev
        except TypeError:
            logger.warning("Cannot compare timestamps %s and %s", prev, cur)
            continue
        if d > (0 if ordinal else pd.Timedelta(0)):
            diffs.append(d)

    if len(diffs) < 2:
        logger.info("Only %d usable time differences, using default step %s", len(diffs), default)
        return default
    if ordinal:
        return sum(diffs) / len(diffs)
    return sum(diffs, pd.Timedelta(0)) / len(diffs)


def _is_date_only(ts: pd.Timestamp, step: pd.Timedelta) -> bool:
    return ts == ts.normalize() and step % pd.Timedelta(days=1) == pd.Timedelta(0)


def extrapolate_times(history: Sequence[Reading], steps: int, step: Optional[Step] = None) -> List[TimeLabel]:
    """Labels for ``steps`` future readings, one ``step`` apart after the last one."""
    if not history:
        return [f"P{i}" for i in range(1, steps + 1)]

    last = parse_time(history[-1].time)
    if last is None:
        logger.warning("Last timestamp %r is unparseable, labelling forecasts P1..P%d",
                       history[-1].time, steps)
        return [f"P{i}" for i in range(1, steps + 1)]

    if step is None:
        step = estimate_time_step(history)

    if _is_ordinal(last):
        return [last + float(step) * i for i in range(1, steps + 1)]

    step = pd.Timedelta(step)
    stamps = [last + step * i for i in range(1, steps + 1)]
    if _is_date_only(last, step):
        return [ts.strftime("%Y-%m-%d") for ts in stamps]
    return [ts.isoformat() for ts in stamps]
