from datetime import datetime, timedelta

import pytest

from workout_tracker.core.elevation import PointNormalizer
from workout_tracker.storage.data_models import RawPoint, Sample, Track
from workout_tracker.utils.config import reset_config

START = datetime(2024, 5, 1, 7, 0, 0)


class FakeHeightModel:
    """Subtracts a fixed geoid offset and remembers what it was asked."""

    def __init__(self, offset=10.0, fail=False):
        self.offset = offset
        self.fail = fail
        self.calls = []

    def height_above_msl(self, lat, lng, elevation):
        self.calls.append((lat, lng, elevation))
        if self.fail:
            raise ValueError("outside model domain")
        return elevation - self.offset


@pytest.fixture(autouse=True)
def fresh_config():
    yield reset_config()
    reset_config()


@pytest.fixture
def height_model():
    return FakeHeightModel()


@pytest.fixture
def failing_height_model():
    return FakeHeightModel(fail=True)


@pytest.fixture
def raw_normalizer():
    """Normalizer that never corrects elevation."""
    return PointNormalizer(height_model=None, use_default_model=False)


@pytest.fixture
def points_factory():
    def make(count, lat_step=0.001, seconds=20, elevations=None, tags=None,
             lat0=50.0, lng0=4.0, creator=""):
        points = []
        for i in range(count):
            points.append(RawPoint(
                time=START + timedelta(seconds=seconds * i),
                lat=lat0 + lat_step * i,
                lng=lng0,
                elevation=elevations[i] if elevations is not None else 100.0,
                creator=creator,
                tags=tags[i] if tags is not None else {},
            ))
        return points
    return make


@pytest.fixture
def track_factory():
    """Track straight from per-sample deltas, bypassing geodesy."""
    def make(distances, durations, elevations=None, metrics=None, slopes=None):
        samples = []
        total_distance = 0.0
        total_duration = 0.0
        for i, (dist, dur) in enumerate(zip(distances, durations)):
            total_distance += dist
            total_duration += dur
            samples.append(Sample(
                time=START + timedelta(seconds=total_duration),
                lat=50.0,
                lng=4.0,
                elevation=elevations[i] if elevations is not None else 100.0,
                distance=dist,
                distance_2d=dist,
                duration=dur,
                total_distance=total_distance,
                total_distance_2d=total_distance,
                total_duration=total_duration,
                slope_grade=slopes[i] if slopes is not None else 0.0,
                metrics=metrics[i] if metrics is not None else {},
            ))
        return Track(samples=tuple(samples))
    return make


@pytest.fixture
def straight_track(track_factory):
    """1000 m in 200 s at a constant 5 m/s, 11 samples."""
    return track_factory([0.0] + [100.0] * 10, [0.0] + [20.0] * 10)

