import numpy as np
import pytest

import pipeline
from helpers import make_reading
from pipeline import run_analysis
from readings import parse_csv


def test_full_run(history, catalog):
    progress = []
    report = run_analysis(
        history, catalog, steps=5, epochs=30,
        progress=lambda pct, stage: progress.append((pct, stage)),
        rng=np.random.default_rng(0), random_state=0,
    )
    assert len(report.results) == len(history)
    assert all(r.is_suitable for r in report.results)
    assert report.forecast_available
    assert len(report.forecasts) == 5
    assert [f.time for f in report.forecasts] == [f"2024-01-{d}" for d in range(11, 16)]

    pcts = [p for p, _ in progress]
    assert pcts == sorted(pcts)
    assert pcts[-1] == 100.0
    stages = {s for _, s in progress}
    assert {"training", "scoring", "forecasting", "done"} <= stages


def test_single_record_scores_without_forecast(catalog):
    report = run_analysis([make_reading(water_temperature=31.0)], catalog)
    assert len(report.results) == 1
    assert not report.results[0].is_suitable
    assert report.forecasts == []
    assert not report.forecast_available


def test_empty_input(catalog):
    report = run_analysis([], catalog)
    assert report.results == []
    assert report.forecasts == []


def test_training_failure_keeps_scores(history, catalog, monkeypatch):
    monkeypatch.setattr(pipeline, "train", lambda *a, **kw: None)
    report = run_analysis(history, catalog)
    assert len(report.results) == len(history)
    assert report.forecasts == []
    assert not report.forecast_available


def test_forecast_failure_keeps_scores(history, catalog, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("model exploded")

    monkeypatch.setattr(pipeline, "forecast", boom)
    report = run_analysis(history, catalog, epochs=2)
    assert len(report.results) == len(history)
    assert report.forecasts == []
    assert not report.forecast_available


def test_rescored_forecasts(history, catalog):
    report = run_analysis(history, catalog, steps=3, epochs=10, score_forecasts=True, random_state=0)
    assert len(report.forecasts) == 3
    for f in report.forecasts:
        assert f.is_prediction
        assert isinstance(f.is_suitable, bool)
        assert 0 <= f.suitability_index <= 100


def test_negative_steps_rejected(history, catalog):
    with pytest.raises(ValueError):
        run_analysis(history, catalog, steps=-1)


def test_numeric_time_column_from_csv(catalog):
    text = "\n".join(
        ["date,location,water_temperature_c,salinity_psu,ph_level,dissolved_oxygen_mg_l,turbidity_ntu,nitrate_mg_l"]
        + [f"{i},Reef A,{26 + 0.1 * i:.1f},35,8.1,6.5,0.5,0.05" for i in (1, 2, 3)]
    )
    readings = parse_csv(text)
    assert [r.time for r in readings] == ["1", "2", "3"]

    report = run_analysis(readings, catalog, steps=3, epochs=5, random_state=0)
    assert [f.time for f in report.forecasts] == [4.0, 5.0, 6.0]
    assert report.time_step == pytest.approx(1.0)
