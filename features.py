# ==============================================================
# features.py — Reading <-> feature vector in the model's order
# ==============================================================

from typing import Sequence

import numpy as np

from config import FEATURES
from readings import Reading


def to_vector(reading: Reading) -> np.ndarray:
    return np.array([getattr(reading, name) for name in FEATURES], dtype=float)


def to_matrix(readings: Sequence[Reading]) -> np.ndarray:
    """Stack readings into an (n, len(FEATURES)) float matrix."""
    if not readings:
        return np.empty((0, len(FEATURES)), dtype=float)
    return np.vstack([to_vector(r) for r in readings])


def as_fields(vector) -> dict:
    return {name: float(v) for name, v in zip(FEATURES, vector)}
