import json

import pytest

from settings_io import DEFAULT_THRESHOLD_CFG, load_catalog, load_threshold_settings
from thresholds import Level, ThresholdBand, ThresholdCatalog, catalog_from_settings


def test_two_sided_band():
    band = ThresholdBand(ideal=(33.0, 36.0), caution=(31.0, 38.0))
    assert band.classify(30.9) is Level.THREATENING
    assert band.classify(32.0) is Level.CAUTION
    assert band.classify(34.0) is Level.IDEAL
    assert band.classify(37.0) is Level.CAUTION
    assert band.classify(38.5) is Level.THREATENING


def test_shared_bound_means_no_caution_side():
    band = ThresholdBand(ideal=(24.0, 28.0), caution=(24.0, 30.0))
    assert band.classify(23.99) is Level.THREATENING
    assert band.classify(24.0) is Level.IDEAL


def test_caution_fraction():
    band = ThresholdBand(ideal=(None, 1.0), caution=(None, 3.0))
    assert band.caution_fraction(0.5) == 0.0
    assert band.caution_fraction(2.0) == pytest.approx(0.5)
    assert band.caution_fraction(3.0) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "ideal, caution",
    [
        ((28.0, 24.0), (20.0, 30.0)),
        ((24.0, 28.0), (25.0, 30.0)),
        ((24.0, 28.0), (20.0, 27.0)),
        ((None, 1.0), (0.5, 3.0)),
    ],
)
def test_ideal_must_sit_inside_caution(ideal, caution):
    with pytest.raises(ValueError):
        ThresholdBand(ideal=ideal, caution=caution)


def test_catalog_requires_every_parameter():
    with pytest.raises(ValueError):
        ThresholdCatalog(bands={"salinity": ThresholdBand(ideal=(33.0, 36.0), caution=(31.0, 38.0))})


def test_catalog_is_read_only(catalog):
    with pytest.raises(TypeError):
        catalog.bands["nitrate"] = ThresholdBand(ideal=(None, 1.0), caution=(None, 2.0))
    with pytest.raises(AttributeError):
        catalog.max_penalty = 5.0


def test_default_catalog_values(catalog):
    assert catalog.max_penalty == 20.0
    assert catalog["water_temperature"].ideal == (24.0, 28.0)
    assert catalog["ph_level"].caution == (7.8, None)
    assert list(catalog) == [
        "water_temperature", "salinity", "ph_level",
        "dissolved_oxygen", "turbidity", "nitrate",
    ]


def test_override_file_is_deep_merged(tmp_path):
    path = tmp_path / "thresholds.json"
    path.write_text(json.dumps({"bands": {"water_temperature": {"caution": [24.0, 31.0]}}}))

    cfg = load_threshold_settings(str(path))
    assert cfg["bands"]["water_temperature"] == {"ideal": [24.0, 28.0], "caution": [24.0, 31.0]}
    assert cfg["bands"]["salinity"] == DEFAULT_THRESHOLD_CFG["bands"]["salinity"]

    catalog = catalog_from_settings(cfg)
    assert catalog["water_temperature"].classify(30.5) is Level.CAUTION


def test_override_file_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "thresholds.json"
    path.write_text(json.dumps({"max_penalty": 10}))
    monkeypatch.setenv("REEF_THRESHOLDS_FILE", str(path))
    assert load_catalog().max_penalty == 10.0


def test_missing_override_file_falls_back(tmp_path):
    cfg = load_threshold_settings(str(tmp_path / "nope.json"))
    assert cfg == DEFAULT_THRESHOLD_CFG


def test_invalid_override_rejected(tmp_path):
    path = tmp_path / "thresholds.json"
    path.write_text(json.dumps({"bands": {"nitrate": {"caution": [None, 0.05]}}}))
    with pytest.raises(ValueError):
        load_catalog(str(path))


@pytest.mark.parametrize(
    "ideal, caution",
    [
        ((6.0, None), (None, None)),
        ((None, 1.0), (None, None)),
        ((24.0, 28.0), (20.0, None)),
    ],
)
def test_bounded_ideal_needs_bounded_caution(ideal, caution):
    with pytest.raises(ValueError):
        ThresholdBand(ideal=ideal, caution=caution)


def test_open_band_on_both_sides_is_allowed():
    band = ThresholdBand(ideal=(None, None), caution=(None, None))
    assert band.classify(-1e6) is Level.IDEAL
    assert band.caution_fraction(5.0) == 0.0


def test_override_opening_caution_side_rejected(tmp_path):
    path = tmp_path / "thresholds.json"
    path.write_text(json.dumps({"bands": {"dissolved_oxygen": {"caution": [None, None]}}}))
    with pytest.raises(ValueError):
        load_catalog(str(path))
