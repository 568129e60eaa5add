import pytest

from helpers import make_reading
from settings_io import load_catalog


@pytest.fixture
def catalog(monkeypatch):
    monkeypatch.delenv("REEF_THRESHOLDS_FILE", raising=False)
    return load_catalog()


@pytest.fixture
def history():
    """Ten daily readings drifting gently around ideal conditions."""
    return [
        make_reading(
            time=f"2024-01-{day:02d}",
            water_temperature=26.0 + 0.1 * day,
            salinity=35.0 - 0.05 * day,
            ph_level=8.1 + 0.005 * day,
            dissolved_oxygen=6.5 - 0.02 * day,
            turbidity=0.5 + 0.01 * day,
            nitrate=0.05 + 0.001 * day,
        )
        for day in range(1, 11)
    ]
