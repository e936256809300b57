import math
from datetime import timedelta

import gpxpy.geo
import pytest

from workout_tracker.core.elevation import PointNormalizer
from workout_tracker.core.track_builder import TrackBuilder
from workout_tracker.storage.data_models import Metric, RawPoint


def _build(points, normalizer, creator=""):
    return TrackBuilder(normalizer=normalizer).build(points, creator)


def test_first_sample_has_zero_deltas(points_factory, raw_normalizer):
    track = _build(points_factory(5), raw_normalizer)
    first = track[0]
    assert first.distance == 0.0
    assert first.distance_2d == 0.0
    assert first.duration == 0.0
    assert first.total_distance == 0.0
    assert first.total_duration == 0.0


def test_running_totals_are_non_decreasing(points_factory, raw_normalizer):
    elevations = [100, 105, 103, 110, 90, 95, 95, 120]
    track = _build(points_factory(8, elevations=elevations), raw_normalizer)

    for prev, cur in zip(track, list(track)[1:]):
        assert cur.total_distance >= prev.total_distance
        assert cur.total_distance_2d >= prev.total_distance_2d
        assert cur.total_duration >= prev.total_duration


def test_deltas_match_geodesy(points_factory, raw_normalizer):
    points = points_factory(3, elevations=[100.0, 130.0, 130.0])
    track = _build(points, raw_normalizer)

    expected_2d = gpxpy.geo.distance(50.0, 4.0, None, 50.001, 4.0, None)
    assert track[1].distance_2d == pytest.approx(expected_2d)
    assert track[1].distance == pytest.approx(math.sqrt(expected_2d ** 2 + 30.0 ** 2))
    assert track[2].distance == pytest.approx(track[2].distance_2d)
    assert track[1].duration == 20.0
    assert track[2].total_duration == 40.0


def test_slope_grade_uses_corrected_elevation(points_factory, height_model):
    normalizer = PointNormalizer(height_model=height_model)
    points = points_factory(2, elevations=[100.0, 110.0], creator="SomeApp")
    track = _build(points, normalizer)

    assert track[0].corrected_elevation == pytest.approx(90.0)
    assert track[1].corrected_elevation == pytest.approx(100.0)
    assert track[0].slope_grade == 0.0
    assert track[1].slope_grade == pytest.approx(10.0 / track[1].distance_2d)


def test_tags_become_metrics(points_factory, raw_normalizer):
    tags = [{"hr": "120", "cad": "bad"}, {}, {"atemp": "0"}]
    track = _build(points_factory(3, tags=tags), raw_normalizer)

    assert track[0].metrics == {Metric.HEART_RATE: 120.0}
    assert track[1].metrics == {}
    assert track[2].metrics == {Metric.TEMPERATURE: 0.0}
    assert track.extra_metrics() == ["heart-rate", "temperature"]


def test_degenerate_points_are_dropped(points_factory, raw_normalizer):
    points = points_factory(3)
    points.insert(1, RawPoint(points[0].time + timedelta(seconds=5), 0.0, 0.0, 100.0))
    track = _build(points, raw_normalizer)
    assert len(track) == 3


def test_workout_totals(points_factory, raw_normalizer):
    elevations = [100.0, 110.0, 105.0, 120.0, 80.0]
    track = _build(points_factory(5, elevations=elevations), raw_normalizer)
    totals = track.totals

    assert totals.min_elevation == 80.0
    assert totals.max_elevation == 120.0
    assert totals.total_up == pytest.approx(25.0)
    assert totals.total_down == pytest.approx(45.0)
    assert totals.total_distance == pytest.approx(track[-1].total_distance)
    assert totals.total_duration == 80.0
    assert totals.pause_duration == 0.0
    assert totals.average_speed == pytest.approx(totals.total_distance / 80.0)
    assert totals.average_speed_no_pause == pytest.approx(totals.average_speed)
    assert totals.max_speed == pytest.approx(max(s.speed() for s in track))


def test_paused_samples_count_as_pause(points_factory, raw_normalizer):
    points = points_factory(3)
    # Standing still for a minute at the last position
    points.append(RawPoint(points[-1].time + timedelta(seconds=60), points[-1].lat, points[-1].lng, 100.0))
    track = _build(points, raw_normalizer)

    assert track.totals.pause_duration == 60.0
    assert track.totals.moving_duration == 40.0


def test_zero_duration_track_reports_zero_not_nan(raw_normalizer):
    points = [RawPoint(None, 50.0, 4.0, 100.0), RawPoint(None, 50.001, 4.0, 100.0)]
    track = _build(points, raw_normalizer)

    assert track.totals.total_duration == 0.0
    assert track.totals.average_speed == 0.0
    assert track.totals.average_speed_no_pause == 0.0


def test_time_deltas_are_absolute(points_factory, raw_normalizer):
    points = list(reversed(points_factory(3)))
    track = _build(points, raw_normalizer)
    assert track[1].duration == 20.0


def test_empty_input_gives_empty_track(raw_normalizer):
    track = _build([], raw_normalizer)
    assert track.is_empty()
    assert track.totals.total_distance == 0.0
    assert track.start is None


def test_none_points_rejected(raw_normalizer):
    with pytest.raises(ValueError):
        _build(None, raw_normalizer)


def test_track_views(points_factory, raw_normalizer):
    track = _build(points_factory(3, tags=[{"hr": 100}, {}, {}]), raw_normalizer)

    center = track.center()
    assert center.lat == pytest.approx(50.001)
    assert center.lng == pytest.approx(4.0)

    df = track.to_dataframe()
    assert len(df) == 3
    assert df["heart-rate"].iloc[0] == 100.0
    assert math.isnan(df["heart-rate"].iloc[1])
    assert track.stop - track.start == timedelta(seconds=40)


def test_elevation_bounds_below_sea_level(points_factory, raw_normalizer):
    track = _build(points_factory(4, elevations=[-420.0, -410.0, -415.0, -400.0]), raw_normalizer)

    assert track.totals.max_elevation == -400.0
    assert track.totals.min_elevation == -420.0
