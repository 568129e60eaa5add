# ==============================================================
# pipeline.py — one analysis run: score, train, forecast
# ==============================================================

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence

import numpy as np

from config import FORECAST_STEPS, TRAIN_EPOCHS
from forecaster import forecast
from readings import ForecastedReading, Reading
from suitability import SuitabilityResult, evaluate
from thresholds import ThresholdCatalog
from timestep import Step, estimate_time_step
from trainer import train

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


@dataclass
class AnalysisReport:
    readings: List[Reading]
    results: List[SuitabilityResult]
    forecasts: List[ForecastedReading] = field(default_factory=list)
    forecast_available: bool = False
    time_step: Optional[Step] = None


# ---------------------------------------------------------------
# Progress helpers
# ---------------------------------------------------------------
def _reporter(progress: Optional[ProgressCallback]) -> ProgressCallback:
    last = [0.0]

    def report(percent: float, stage: str) -> None:
        # never move backwards
        percent = max(last[0], min(100.0, float(percent)))
        last[0] = percent
        if progress is not None:
            progress(percent, stage)

    return report


def _rescore(record: ForecastedReading, catalog: ThresholdCatalog) -> ForecastedReading:
    res = evaluate(record, catalog)
    return replace(record, is_suitable=res.is_suitable, suitability_index=res.index)


# ---------------------------------------------------------------
# Analysis run
# ---------------------------------------------------------------
def run_analysis(
    readings: Sequence[Reading],
    catalog: ThresholdCatalog,
    *,
    steps: int = FORECAST_STEPS,
    epochs: int = TRAIN_EPOCHS,
    score_forecasts: bool = False,
    progress: Optional[ProgressCallback] = None,
    rng: Optional[np.random.Generator] = None,
    random_state=None,
) -> AnalysisReport:
    """
    Score every reading, then train on the whole batch and roll the model
    forward ``steps`` times. Forecast failures leave ``forecasts`` empty;
    scoring always completes.
    """
    if steps < 0:
        raise ValueError("steps must be non-negative")
    report = _reporter(progress)
    readings = list(readings)
    report(10, "parsed")

    # (1) Train
    report(15, "training")
    t0 = time.perf_counter()
    trained = train(
        readings,
        epochs=epochs,
        on_epoch_end=lambda epoch, loss: report(15 + 30 * epoch / epochs, "training"),
        random_state=random_state,
    )
    logger.info("Model training took %.2fs", time.perf_counter() - t0)
    report(45, "trained")

    # (2) Suitability per reading
    results: List[SuitabilityResult] = []
    for i, r in enumerate(readings):
        res = evaluate(r, catalog)
        logger.debug("Reading %s: suitable=%s index=%d", r.time, res.is_suitable, res.index)
        results.append(res)
        report(50 + 25 * (i + 1) / len(readings), "scoring")
    report(75, "scored")

    out = AnalysisReport(readings=readings, results=results)
    if trained is None:
        logger.warning("Model training failed or skipped, no predictions will be made")
        report(100, "done")
        return out

    # (3) Forecast
    report(80, "forecasting")
    out.time_step = estimate_time_step(readings)
    try:
        predicted = forecast(
            trained.model,
            trained.params,
            readings,
            steps,
            rng=rng,
            time_step=out.time_step,
            on_step_end=lambda step, _rec: report(80 + 20 * step / max(steps, 1), "forecasting"),
        )
    except Exception:
        logger.exception("Error during forecasting")
        report(100, "done")
        return out
    if score_forecasts:
        predicted = [_rescore(p, catalog) for p in predicted]

    out.forecasts = predicted
    out.forecast_available = True
    report(100, "done")
    return out
