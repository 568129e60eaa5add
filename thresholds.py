from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from config import FEATURES

Bound = Tuple[Optional[float], Optional[float]]


class Level(str, Enum):
    IDEAL = "ideal"
    CAUTION = "caution"
    THREATENING = "threatening"


# ===============================
#  BANDS
# ===============================
@dataclass(frozen=True)
class ThresholdBand:
    """Ideal and caution bounds for one parameter.

    A ``None`` bound leaves that side open; ideal and caution must be open
    on the same sides. Anything outside ``caution`` is
    threatening; when ``ideal`` and ``caution`` share a bound there is no
    caution zone on that side.
    """

    ideal: Bound
    caution: Bound

    def __post_init__(self):
        ilo, ihi = self.ideal
        clo, chi = self.caution
        if ilo is not None and ihi is not None and ilo > ihi:
            raise ValueError(f"ideal band is inverted: {self.ideal}")
        if (ilo is None) != (clo is None) or (clo is not None and clo > ilo):
            raise ValueError(f"ideal {self.ideal} not inside caution {self.caution}")
        if (ihi is None) != (chi is None) or (chi is not None and chi < ihi):
            raise ValueError(f"ideal {self.ideal} not inside caution {self.caution}")

    def classify(self, value: float) -> Level:
        clo, chi = self.caution
        if (clo is not None and value < clo) or (chi is not None and value > chi):
            return Level.THREATENING
        ilo, ihi = self.ideal
        if (ilo is not None and value < ilo) or (ihi is not None and value > ihi):
            return Level.CAUTION
        return Level.IDEAL

    def caution_fraction(self, value: float) -> float:
        """How far into the caution zone ``value`` sits: 0 at ideal, 1 at the edge."""
        ilo, ihi = self.ideal
        clo, chi = self.caution
        if ilo is not None and value < ilo:
            return (ilo - value) / (ilo - clo)
        if ihi is not None and value > ihi:
            return (value - ihi) / (chi - ihi)
        return 0.0


# ===============================
#  CATALOG
# ===============================
@dataclass(frozen=True)
class ThresholdCatalog:
    bands: Mapping[str, ThresholdBand]
    max_penalty: float = 20.0

    def __post_init__(self):
        missing = [p for p in FEATURES if p not in self.bands]
        if missing:
            raise ValueError(f"threshold catalog missing parameters: {missing}")
        if self.max_penalty < 0:
            raise ValueError("max_penalty must be non-negative")
        object.__setattr__(self, "bands", MappingProxyType(dict(self.bands)))

    def __getitem__(self, name: str) -> ThresholdBand:
        return self.bands[name]

    def __iter__(self):
        return iter(FEATURES)


def _bound(raw) -> Bound:
    lo, hi = raw
    return (None if lo is None else float(lo), None if hi is None else float(hi))


def catalog_from_settings(cfg: Dict[str, Any]) -> ThresholdCatalog:
    bands = {
        name: ThresholdBand(ideal=_bound(spec["ideal"]), caution=_bound(spec["caution"]))
        for name, spec in cfg["bands"].items()
    }
    return ThresholdCatalog(bands=bands, max_penalty=float(cfg.get("max_penalty", 20.0)))
