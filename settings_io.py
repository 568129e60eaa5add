from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, Optional

from config import THRESHOLDS_FILE_ENV
from thresholds import ThresholdCatalog, catalog_from_settings

logger = logging.getLogger(__name__)

# ==========================================================
# DEFAULT CONFIG (coral tolerance bands)
# ==========================================================
# null on a side means the band is open there.
DEFAULT_THRESHOLD_CFG: Dict[str, Any] = {
    "max_penalty": 20.0,
    "bands": {
        "water_temperature": {"ideal": [24.0, 28.0], "caution": [24.0, 30.0]},
        "salinity": {"ideal": [33.0, 36.0], "caution": [31.0, 38.0]},
        "ph_level": {"ideal": [8.0, None], "caution": [7.8, None]},
        "dissolved_oxygen": {"ideal": [6.0, None], "caution": [4.0, None]},
        "turbidity": {"ideal": [None, 1.0], "caution": [None, 3.0]},
        "nitrate": {"ideal": [None, 0.1], "caution": [None, 0.3]},
    },
}


# ==========================================================
# MERGE HELPER
# ==========================================================
def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)
        else:
            merged[k] = v
    return merged


# ==========================================================
# MAIN FUNCTIONS
# ==========================================================
def load_threshold_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Defaults merged with the JSON override file, if one is configured."""
    path = path or os.environ.get(THRESHOLDS_FILE_ENV)
    if not path:
        return _deep_merge(DEFAULT_THRESHOLD_CFG, {})

    if not os.path.exists(path):
        logger.warning("Threshold file %s not found, using defaults", path)
        return _deep_merge(DEFAULT_THRESHOLD_CFG, {})

    with open(path, encoding="utf-8") as fh:
        user_cfg = json.load(fh) or {}
    logger.info("Loaded threshold overrides from %s", path)
    return _deep_merge(DEFAULT_THRESHOLD_CFG, user_cfg)


def load_catalog(path: Optional[str] = None) -> ThresholdCatalog:
    return catalog_from_settings(load_threshold_settings(path))
