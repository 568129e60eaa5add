# ==============================================================
# forecaster.py — autoregressive multi-step rollout
# ==============================================================

from __future__ import annotations
import logging
from typing import Callable, List, Mapping, Optional, Sequence

import numpy as np

from config import FEATURES, FORECAST_STEPS, JITTER, MEASUREMENT_FLOOR, PH_BOUNDS
from features import as_fields, to_vector
from readings import ForecastedReading, Reading
from timestep import Step, extrapolate_times
from trainer import ForecastModel
import scaler

logger = logging.getLogger(__name__)

StepCallback = Callable[[int, ForecastedReading], None]

_PH_INDEX = FEATURES.index("ph_level")


def _jitter_vector(amplitudes: Mapping[str, float]) -> np.ndarray:
    return np.array([float(amplitudes.get(name, 0.0)) for name in FEATURES], dtype=float)


def clamp(values: np.ndarray) -> np.ndarray:
    """Floor every measurement at zero and keep pH in its plausible band."""
    out = np.maximum(values, MEASUREMENT_FLOOR)
    lo, hi = PH_BOUNDS
    out[_PH_INDEX] = min(hi, max(lo, out[_PH_INDEX]))
    return out


def predict_next(model: ForecastModel, params: scaler.NormalizationParams, seed: Reading) -> np.ndarray:
    """One step: normalize the seed, run the model, return physical units."""
    normalized = scaler.apply(to_vector(seed), params)
    return scaler.invert(model.predict(normalized), params)


def forecast(
    model: ForecastModel,
    params: scaler.NormalizationParams,
    seed_history: Sequence[Reading],
    steps: int = FORECAST_STEPS,
    *,
    jitter: Optional[Mapping[str, float]] = None,
    rng: Optional[np.random.Generator] = None,
    time_step: Optional[Step] = None,
    on_step_end: Optional[StepCallback] = None,
) -> List[ForecastedReading]:
    """
    Roll the model forward ``steps`` times, each step seeded by the previous
    step's output (the first by the last historical reading).

    ``params`` are the ones fitted at training time and are never refit here.
    Pass ``jitter={}`` (or all-zero amplitudes) for a deterministic rollout.
    """
    if steps < 0:
        raise ValueError("steps must be non-negative")
    if not seed_history:
        logger.warning("No seed history, nothing to forecast")
        return []

    amplitudes = _jitter_vector(JITTER if jitter is None else jitter)
    rng = rng if rng is not None else np.random.default_rng()
    labels = extrapolate_times(seed_history, steps, time_step)

    sequence: List[Reading] = list(seed_history)
    predicted: List[ForecastedReading] = []

    for i in range(steps):
        seed = sequence[-1]
        values = predict_next(model, params, seed)
        values = values + rng.uniform(-0.5, 0.5, size=len(FEATURES)) * amplitudes
        values = clamp(values)

        record = ForecastedReading(time=labels[i], location=seed.location, **as_fields(values))
        logger.debug("Prediction %s: %s", record.time, values)

        predicted.append(record)
        sequence.append(record)
        if on_step_end is not None:
            on_step_end(i + 1, record)

    logger.info("Generated %d forecast steps", len(predicted))
    return predicted
