#!/usr/bin/env python3
"""
Track building: raw ordered points -> immutable Track.

Each sample gets its distance (3D and 2D) and duration from the previous
sample plus running totals; workout-level totals are collected in the same
pass over the points.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

import gpxpy.geo

from ..storage.data_models import RawPoint, Sample, Track, TrackTotals
from ..utils.config import EngineConfig, get_config
from .elevation import PointNormalizer
from .processing import filter_points, parse_metric_tags

logger = logging.getLogger(__name__)

def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or math.isnan(value):
        return None
    return value


def _nan_to_zero(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return value


def distance_3d(a: RawPoint, b: RawPoint) -> float:
    return gpxpy.geo.distance(
        a.lat, a.lng, _finite_or_none(a.elevation),
        b.lat, b.lng, _finite_or_none(b.elevation),
    )


def distance_2d(a: RawPoint, b: RawPoint) -> float:
    return gpxpy.geo.distance(a.lat, a.lng, None, b.lat, b.lng, None)


def time_difference(a: RawPoint, b: RawPoint) -> float:
    if a.time is None or b.time is None:
        return 0.0
    return abs((b.time - a.time).total_seconds())


@dataclass
class _TotalsAccumulator:
    """Running workout totals, fed one sample at a time."""
    threshold_kmh: float
    total_distance: float = 0.0
    total_distance_2d: float = 0.0
    total_duration: float = 0.0
    pause_duration: float = 0.0
    min_elevation: Optional[float] = None
    max_elevation: Optional[float] = None
    total_up: float = 0.0
    total_down: float = 0.0
    max_speed: float = 0.0
    count: int = 0

    def add(self, sample: Sample, previous: Optional[Sample]):
        self.count += 1
        self.total_distance += sample.distance
        self.total_distance_2d += sample.distance_2d
        self.total_duration += sample.duration

        ele = sample.enhanced_elevation()
        if self.min_elevation is None:
            # The first sample seeds both bounds
            self.min_elevation = ele
            self.max_elevation = ele
        else:
            self.min_elevation = min(self.min_elevation, ele)
            self.max_elevation = max(self.max_elevation, ele)

        if previous is not None:
            delta = ele - previous.enhanced_elevation()
            if delta > 0:
                self.total_up += delta
            else:
                self.total_down += -delta

        speed = sample.speed()
        self.max_speed = max(self.max_speed, speed)
        if speed * 3.6 < self.threshold_kmh:
            self.pause_duration += sample.duration

    def finalize(self) -> TrackTotals:
        if self.count == 0:
            return TrackTotals()

        average_speed = float("nan")
        if self.total_duration > 0:
            average_speed = self.total_distance / self.total_duration

        average_speed_no_pause = float("nan")
        moving = self.total_duration - self.pause_duration
        if moving > 0:
            average_speed_no_pause = self.total_distance / moving

        # Device glitches can invert the bounds
        min_elevation = min(self.min_elevation, self.max_elevation)

        return TrackTotals(
            total_distance=_nan_to_zero(self.total_distance),
            total_distance_2d=_nan_to_zero(self.total_distance_2d),
            total_duration=_nan_to_zero(self.total_duration),
            pause_duration=_nan_to_zero(self.pause_duration),
            min_elevation=_nan_to_zero(min_elevation),
            max_elevation=_nan_to_zero(self.max_elevation),
            total_up=_nan_to_zero(self.total_up),
            total_down=_nan_to_zero(self.total_down),
            average_speed=_nan_to_zero(average_speed),
            average_speed_no_pause=_nan_to_zero(average_speed_no_pause),
            max_speed=_nan_to_zero(self.max_speed),
        )


class TrackBuilder:
    """Builds Tracks from raw ordered points."""

    def __init__(self, normalizer: Optional[PointNormalizer] = None,
                 config: Optional[EngineConfig] = None):
        self.config = config or get_config()
        self.normalizer = normalizer or PointNormalizer(config=self.config)

    def build(self, points: Iterable[RawPoint], creator: str = "") -> Track:
        """
        Build a Track from raw points.

        Args:
            points: Time-ordered raw points
            creator: Creator tag used for points that carry none

        Returns:
            A new Track; an empty Track when no usable point remains
        """
        if points is None:
            raise ValueError("points are required to build a track")

        usable = filter_points(points)
        threshold = self.config.moving_speed_threshold_kmh
        totals = _TotalsAccumulator(threshold_kmh=threshold)

        samples: List[Sample] = []
        prev_point: Optional[RawPoint] = None
        prev_sample: Optional[Sample] = None
        total_dist = 0.0
        total_dist_2d = 0.0
        total_time = 0.0

        for point in usable:
            point_creator = point.creator or creator
            corrected = self.normalizer.correct_elevation(
                point_creator, point.lat, point.lng, point.elevation
            )

            dist = 0.0
            dist_2d = 0.0
            dt = 0.0
            if prev_point is not None:
                dist_2d = _nan_to_zero(distance_2d(prev_point, point))
                dist = _nan_to_zero(distance_3d(prev_point, point))
                dt = _nan_to_zero(time_difference(prev_point, point))

                total_dist += dist
                total_dist_2d += dist_2d
                total_time += dt

            sample = Sample(
                time=point.time,
                lat=point.lat,
                lng=point.lng,
                elevation=point.elevation,
                creator=point_creator,
                corrected_elevation=corrected,
                distance=dist,
                distance_2d=dist_2d,
                duration=dt,
                total_distance=total_dist,
                total_distance_2d=total_dist_2d,
                total_duration=total_time,
                metrics=parse_metric_tags(point.tags),
            )
            if prev_sample is not None and dist_2d > 0:
                grade = (sample.enhanced_elevation() - prev_sample.enhanced_elevation()) / dist_2d
                sample = _with_slope(sample, _nan_to_zero(grade))

            totals.add(sample, prev_sample)
            samples.append(sample)
            prev_point = point
            prev_sample = sample

        logger.debug("Built track with %d samples (%d raw points)", len(samples), len(usable))
        return Track(samples=tuple(samples), totals=totals.finalize(), creator=creator)


def _with_slope(sample: Sample, grade: float) -> Sample:
    return replace(sample, slope_grade=grade)


def build_track(points: Iterable[RawPoint], creator: str = "",
                normalizer: Optional[PointNormalizer] = None) -> Track:
    """Convenience function to build a Track."""
    return TrackBuilder(normalizer=normalizer).build(points, creator)
