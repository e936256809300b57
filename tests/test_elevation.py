import math

import pytest

from pyproj.exceptions import ProjError

from workout_tracker.core.elevation import (
    EGM96HeightModel,
    PointNormalizer,
    correct_elevation,
    normalize_degrees,
)
from workout_tracker.utils.config import get_config


def test_allowlisted_creator_keeps_raw_elevation(height_model):
    normalizer = PointNormalizer(height_model=height_model)
    assert normalizer.correct_elevation("Garmin", 50.0, 4.0, 120.0) == 120.0
    assert height_model.calls == []


def test_other_creator_goes_through_height_model(height_model):
    normalizer = PointNormalizer(height_model=height_model)
    assert normalizer.correct_elevation("SomeApp", 50.0, 4.0, 120.0) == pytest.approx(110.0)
    assert len(height_model.calls) == 1


def test_coordinates_are_normalized_for_model(height_model):
    normalizer = PointNormalizer(height_model=height_model)
    normalizer.correct_elevation("SomeApp", -33.5, -70.25, 500.0)
    lat, lng, ele = height_model.calls[0]
    assert lat == pytest.approx(326.5)
    assert lng == pytest.approx(289.75)
    assert ele == 500.0


def test_model_failure_returns_raw_elevation(failing_height_model):
    normalizer = PointNormalizer(height_model=failing_height_model)
    assert normalizer.correct_elevation("SomeApp", 50.0, 4.0, 120.0) == 120.0


def test_non_finite_model_output_returns_raw_elevation():
    class NaNModel:
        def height_above_msl(self, lat, lng, elevation):
            return float("nan")

    normalizer = PointNormalizer(height_model=NaNModel())
    assert normalizer.correct_elevation("SomeApp", 50.0, 4.0, 120.0) == 120.0


def test_missing_elevation_is_not_corrected(height_model):
    normalizer = PointNormalizer(height_model=height_model)
    assert normalizer.correct_elevation("SomeApp", 50.0, 4.0, None) is None
    assert math.isnan(normalizer.correct_elevation("SomeApp", 50.0, 4.0, float("nan")))
    assert height_model.calls == []


def test_without_model_elevation_passes_through():
    normalizer = PointNormalizer(height_model=None, use_default_model=False)
    assert normalizer.correct_elevation("SomeApp", 50.0, 4.0, 87.5) == 87.5


def test_allowlist_is_configurable(height_model):
    get_config().update_elevation_settings(correct_altitude_creators=["MyWatch"])
    normalizer = PointNormalizer(height_model=height_model)

    assert normalizer.correct_elevation("MyWatch", 50.0, 4.0, 120.0) == 120.0
    assert normalizer.correct_elevation("Garmin", 50.0, 4.0, 120.0) == pytest.approx(110.0)


def test_module_level_helper(height_model):
    assert correct_elevation("SomeApp", 50.0, 4.0, 20.0, height_model=height_model) == pytest.approx(10.0)


def test_normalize_degrees():
    assert normalize_degrees(10.0) == 10.0
    assert normalize_degrees(0.0) == 0.0
    assert normalize_degrees(-10.0) == 350.0


def test_real_geoid_model_corrects_or_is_unavailable():
    model = EGM96HeightModel.create()
    if model is None:
        # No grid installed: the normalizer must then keep raw elevations
        assert PointNormalizer().height_model is None
        return

    assert "ballpark" not in model.description.lower()
    corrected = PointNormalizer(height_model=model).correct_elevation("SomeApp", 50.0, 4.0, 100.0)
    # Geoid undulation around (50N, 4E) is roughly 45 m
    assert 100.0 - corrected == pytest.approx(45.0, abs=6.0)


def test_model_that_leaves_heights_unchanged_is_refused(monkeypatch):
    def unchanged(self):
        raise ProjError("geoid grid not applied")

    monkeypatch.setattr(EGM96HeightModel, "check", unchanged)
    assert EGM96HeightModel.create() is None
