from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import numpy as np

from config import FEATURES, STATUS_SUITABLE_MIN, STATUS_WARNING_MIN
from readings import Reading
from thresholds import Level, ThresholdCatalog

# ===============================
#  MESSAGES
# ===============================
_UNITS = {
    "water_temperature": "°C",
    "salinity": " PSU",
    "ph_level": "",
    "dissolved_oxygen": " mg/L",
    "turbidity": " NTU",
    "nitrate": " mg/L",
}

_THREAT_TEXT = {
    "water_temperature": "Temperature ({v}) is outside the ideal or caution range.",
    "salinity": "Salinity ({v}) is in a dangerous range.",
    "ph_level": "pH Level ({v}) indicates significant acidification stress.",
    "dissolved_oxygen": "Dissolved Oxygen ({v}) is dangerously low (hypoxia).",
    "turbidity": "Turbidity ({v}) is significantly stressing corals.",
    "nitrate": "Nitrate ({v}) levels are high enough to cause algal blooms.",
}

_CAUTION_LABEL = {
    "water_temperature": "Temperature in caution zone",
    "salinity": "Salinity in caution zone",
    "ph_level": "pH in caution zone",
    "dissolved_oxygen": "Dissolved Oxygen in caution zone",
    "turbidity": "Turbidity in caution zone",
    "nitrate": "Nitrate in caution zone",
}

_THREAT_ADVICE = {
    "water_temperature": "High/low water temperature detected. Consider measures to stabilize or shade if applicable.",
    "salinity": "Salinity is outside safe range. Identify and address sources of freshwater influx or excessive evaporation.",
    "ph_level": "pH level is critically low (acidification). Investigate causes like CO2 absorption or pollution.",
    "dissolved_oxygen": "Dissolved oxygen is dangerously low (hypoxia). Enhance water circulation or aeration; reduce organic load.",
    "turbidity": "Turbidity is very high, blocking light. Address sediment runoff, dredging activities, or algal blooms.",
    "nitrate": "Nitrate level is critically high, risking algal blooms. Control nutrient sources from runoff or sewage.",
}

_CAUTION_ADVICE = {
    "water_temperature": "Monitor temperature closely; it's nearing the upper caution limit.",
    "salinity": "Salinity is in the caution zone. Monitor for further deviations.",
    "ph_level": "pH is nearing the lower caution limit. Monitor for acidification trends.",
    "dissolved_oxygen": "Dissolved oxygen is in the caution range. Monitor for potential hypoxia.",
    "turbidity": "Turbidity is elevated. Monitor water clarity and potential light reduction.",
    "nitrate": "Nitrate level is elevated. Monitor for potential contribution to algal growth.",
}

_ALL_CLEAR_ADVICE = "Environment appears ideal. Continue regular monitoring."


@dataclass(frozen=True)
class SuitabilityResult:
    is_suitable: bool
    index: int
    rationale: str
    flags: Mapping[str, bool]
    levels: Mapping[str, Level]
    cautions: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    @property
    def status(self) -> str:
        return status_from_index(self.index)


# ===============================
#  SCORING
# ===============================
def classify(reading: Reading, catalog: ThresholdCatalog) -> Dict[str, Level]:
    return {name: catalog[name].classify(getattr(reading, name)) for name in FEATURES}


def penalty(name: str, value: float, level: Level, catalog: ThresholdCatalog) -> float:
    """Full penalty when threatening, linear across the caution band, else 0."""
    if level is Level.THREATENING:
        return catalog.max_penalty
    if level is Level.CAUTION:
        return catalog.max_penalty * catalog[name].caution_fraction(value)
    return 0.0


def suitability_index(reading: Reading, catalog: ThresholdCatalog, levels=None) -> int:
    levels = levels or classify(reading, catalog)
    total = sum(penalty(n, getattr(reading, n), levels[n], catalog) for n in FEATURES)
    # round half up, then clamp
    return int(np.clip(np.floor(100.0 - total + 0.5), 0, 100))


def _fmt(name: str, value: float) -> str:
    return f"{value:g}{_UNITS[name]}"


def evaluate(reading: Reading, catalog: ThresholdCatalog) -> SuitabilityResult:
    levels = classify(reading, catalog)
    threats = [n for n in FEATURES if levels[n] is Level.THREATENING]
    cautions = tuple(n for n in FEATURES if levels[n] is Level.CAUTION)
    is_suitable = not threats

    if threats:
        issues = " ".join(_THREAT_TEXT[n].format(v=_fmt(n, getattr(reading, n))) for n in threats)
        rationale = f"Environment is threatening due to: {issues}"
        advice = tuple(_THREAT_ADVICE[n] for n in threats)
    elif cautions:
        labels = ", ".join(_CAUTION_LABEL[n] for n in cautions)
        rationale = f"Environment is suitable, but with factors in caution: {labels}."
        advice = tuple(_CAUTION_ADVICE[n] for n in cautions)
    else:
        rationale = "Environment is suitable for coral growth."
        advice = (_ALL_CLEAR_ADVICE,)

    return SuitabilityResult(
        is_suitable=is_suitable,
        index=suitability_index(reading, catalog, levels),
        rationale=rationale,
        flags={n: levels[n] is Level.THREATENING for n in FEATURES},
        levels=levels,
        cautions=cautions,
        recommendations=advice,
    )


def status_from_index(index) -> str:
    if index is None:
        return "Unknown"
    if index >= STATUS_SUITABLE_MIN:
        return "Suitable"
    if index >= STATUS_WARNING_MIN:
        return "Warning"
    return "Threatening"
