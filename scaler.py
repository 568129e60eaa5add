# scaler.py — min-max feature normalizer
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from config import NORM_EPSILON
from features import to_matrix
from readings import Reading


@dataclass(frozen=True, eq=False)
class NormalizationParams:
    min: np.ndarray
    max: np.ndarray
    epsilon: float = NORM_EPSILON

    def __post_init__(self):
        for arr in (self.min, self.max):
            arr.setflags(write=False)

    @property
    def range(self) -> np.ndarray:
        return self.max - self.min + self.epsilon


def fit_matrix(matrix: np.ndarray, epsilon: float = NORM_EPSILON) -> Tuple[np.ndarray, NormalizationParams]:
    if matrix.shape[0] == 0:
        raise ValueError("cannot fit normalization on an empty batch")
    params = NormalizationParams(
        min=matrix.min(axis=0).astype(float),
        max=matrix.max(axis=0).astype(float),
        epsilon=epsilon,
    )
    return apply(matrix, params), params


def fit(batch: Sequence[Reading], epsilon: float = NORM_EPSILON) -> Tuple[np.ndarray, NormalizationParams]:
    """Fit per-feature min/max on ``batch`` and return the scaled batch with them."""
    return fit_matrix(to_matrix(batch), epsilon)


def apply(vector, params: NormalizationParams) -> np.ndarray:
    return (np.asarray(vector, dtype=float) - params.min) / params.range


def invert(vector, params: NormalizationParams) -> np.ndarray:
    return np.asarray(vector, dtype=float) * params.range + params.min
