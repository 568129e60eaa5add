# trainer.py — feed-forward next-state approximator for the six water params
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np
from sklearn.neural_network import MLPRegressor

from config import (
    BATCH_SIZE_DIVISOR,
    FEATURES,
    HIDDEN_LAYERS,
    LEARNING_RATE,
    MIN_TRAIN_RECORDS,
    TRAIN_EPOCHS,
)
from readings import Reading
import scaler

logger = logging.getLogger(__name__)

EpochCallback = Callable[[int, float], None]


class ForecastModel:
    """A fitted regressor mapping one normalized feature vector to the next."""

    def __init__(self, regressor: MLPRegressor):
        self._regressor = regressor

    @property
    def loss_curve(self) -> List[float]:
        return list(self._regressor.loss_curve_)

    def predict(self, vector) -> np.ndarray:
        x = np.asarray(vector, dtype=float).reshape(1, len(FEATURES))
        return np.asarray(self._regressor.predict(x), dtype=float).reshape(-1)


@dataclass(frozen=True, eq=False)
class TrainingResult:
    model: ForecastModel
    params: scaler.NormalizationParams


def batch_size_for(n_records: int) -> int:
    return max(1, n_records // BATCH_SIZE_DIVISOR)


def train(
    batch: Sequence[Reading],
    *,
    epochs: int = TRAIN_EPOCHS,
    on_epoch_end: Optional[EpochCallback] = None,
    random_state=None,
) -> Optional[TrainingResult]:
    """
    Fit the model on ``batch`` with the normalized input as its own target.

    Returns None when there are fewer than two records or when the fit
    fails; callers treat that as "no forecast for this dataset".
    """
    if epochs < 1:
        raise ValueError("epochs must be at least 1")
    if len(batch) < MIN_TRAIN_RECORDS:
        logger.info("Not enough data to train on (%d records), skipping", len(batch))
        return None

    try:
        normalized, params = scaler.fit(batch)
        regressor = MLPRegressor(
            hidden_layer_sizes=HIDDEN_LAYERS,
            activation="relu",
            solver="adam",
            learning_rate_init=LEARNING_RATE,
            batch_size=batch_size_for(len(batch)),
            shuffle=True,
            random_state=random_state,
        )
    except Exception:
        logger.exception("Error preparing model training")
        return None

    # one partial_fit == one shuffled pass over the batch
    for epoch in range(1, epochs + 1):
        try:
            regressor.partial_fit(normalized, normalized)
        except Exception:
            logger.exception("Error during model training (epoch %d)", epoch)
            return None
        logger.debug("Epoch %d: loss = %.6f", epoch, regressor.loss_)
        # callback errors propagate
        if on_epoch_end is not None:
            on_epoch_end(epoch, float(regressor.loss_))

    logger.info("Model trained on %d records, final loss %.6f", len(batch), regressor.loss_)
    return TrainingResult(model=ForecastModel(regressor), params=params)
