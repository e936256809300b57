from datetime import datetime

import pytest

from workout_tracker.core.interval_finder import (
    IntervalFinder,
    better_interval_record,
    fastest_distances,
)
from workout_tracker.storage.data_models import IntervalRecord, IntervalTarget, Workout

ONE_KM = IntervalTarget("1 km", 1000.0)


def test_straight_line_kilometer(straight_track):
    records = fastest_distances(straight_track, [ONE_KM])

    assert len(records) == 1
    record = records[0]
    assert record.duration == pytest.approx(200.0)
    assert record.distance == pytest.approx(1000.0)
    assert record.average_speed == pytest.approx(5.0)
    assert record.start_index == 0
    assert record.end_index == 10


def test_equal_duration_prefers_longer_distance(track_factory):
    # 1000 m in 200 s, a pause, then 1005 m in 200 s
    track = track_factory(
        [0.0, 500.0, 500.0, 0.0, 502.5, 502.5],
        [0.0, 100.0, 100.0, 600.0, 100.0, 100.0],
    )
    record = fastest_distances(track, [ONE_KM])[0]

    assert record.duration == pytest.approx(200.0)
    assert record.distance == pytest.approx(1005.0)
    assert record.end_index == 5


def test_fastest_window_in_the_middle(track_factory):
    durations = [0.0] + [50.0] * 5 + [10.0] * 5
    track = track_factory([0.0] + [100.0] * 10, durations)

    record = fastest_distances(track, [IntervalTarget("300 m", 300.0)])[0]

    assert record.start_index == 8
    assert record.end_index == 10
    assert record.duration == pytest.approx(30.0)
    assert record.average_speed == pytest.approx(10.0)


def test_pauses_do_not_count_towards_duration(track_factory):
    # 60 s standing still between two moving stretches
    track = track_factory([0.0, 500.0, 0.0, 500.0], [0.0, 100.0, 60.0, 100.0])
    record = fastest_distances(track, [ONE_KM])[0]

    assert record.duration == pytest.approx(200.0)


def test_zero_moving_duration_is_never_a_record(track_factory):
    track = track_factory([0.0, 600.0, 600.0], [0.0, 0.0, 0.0])
    assert fastest_distances(track, [ONE_KM]) == []


def test_target_longer_than_track_has_no_record(straight_track):
    records = fastest_distances(straight_track, [ONE_KM, IntervalTarget("5 km", 5000.0)])
    assert [r.label for r in records] == ["1 km"]


def test_records_never_exceed_track(points_factory, raw_normalizer):
    from workout_tracker.core.track_builder import TrackBuilder

    track = TrackBuilder(normalizer=raw_normalizer).build(points_factory(30))
    targets = [IntervalTarget(f"{d} m", float(d)) for d in (100, 500, 1000, 3000, 5000)]

    for record in fastest_distances(track, targets):
        assert record.duration > 0
        assert record.target_distance <= track.totals.total_distance
        assert record.distance >= record.target_distance


def test_short_tracks_have_no_records(track_factory):
    assert fastest_distances(track_factory([], []), [ONE_KM]) == []
    assert fastest_distances(track_factory([0.0], [0.0]), [ONE_KM]) == []


def test_workout_identity_is_copied(straight_track):
    date = datetime(2024, 5, 1, 7, 0)
    workout = Workout(workout_id=42, date=date, workout_type="running", track=straight_track)

    record = IntervalFinder().find(workout, [ONE_KM])[0]
    assert record.workout_id == 42
    assert record.date == date


def test_workout_without_track_has_no_records():
    workout = Workout(workout_id=1, date=None, track=None)
    assert fastest_distances(workout, [ONE_KM]) == []


def test_invalid_inputs_rejected(straight_track):
    with pytest.raises(ValueError):
        fastest_distances(None, [ONE_KM])
    with pytest.raises(ValueError):
        fastest_distances(straight_track, [IntervalTarget("bad", -1.0)])
    with pytest.raises(ValueError):
        fastest_distances(straight_track, [IntervalTarget("bad", float("nan"))])


def test_better_interval_record():
    base = IntervalRecord("1 km", 1000.0, 1000.0, 200.0, 5.0, 0, 10)
    faster = IntervalRecord("1 km", 1000.0, 1000.0, 190.0, 5.2, 0, 10)
    longer = IntervalRecord("1 km", 1000.0, 1005.0, 200.0, 5.0, 0, 10)

    assert better_interval_record(faster, base)
    assert better_interval_record(longer, base)
    assert not better_interval_record(base, longer)
    assert not better_interval_record(base, base)
