"""
Range statistics for a slice of a track.
Aggregates elevation, slope, speed and sensor metrics over an inclusive index
range in a single forward pass.
"""
import math
from dataclasses import dataclass
from typing import Optional

from ..storage.data_models import Metric, RangeStats, Sample, Track
from ..utils.config import EngineConfig, get_config


@dataclass
class _MetricAccumulator:
    """Running sum/count/min/max for one sensor metric."""
    positive_only: bool = True
    total: float = 0.0
    count: int = 0
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def add(self, value: Optional[float]):
        if value is None or math.isnan(value):
            return
        if self.positive_only and value <= 0:
            return

        self.total += value
        self.count += 1
        if self.minimum is None or value < self.minimum:
            self.minimum = value
        if self.maximum is None or value > self.maximum:
            self.maximum = value

    @property
    def average(self) -> Optional[float]:
        if self.count == 0:
            return None
        return self.total / self.count


@dataclass
class _SlopeAccumulator:
    total: float = 0.0
    count: int = 0
    minimum: float = 0.0
    maximum: float = 0.0

    def add(self, grade: float):
        if self.count == 0:
            self.minimum = grade
            self.maximum = grade
        else:
            self.minimum = min(self.minimum, grade)
            self.maximum = max(self.maximum, grade)
        self.total += grade
        self.count += 1


class RangeAggregator:
    """
    Computes RangeStats over [lo, hi] of a Track.

    The track is only read; one aggregator can serve any number of ranges.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()

    def stats_for_range(self, track: Track, lo: int, hi: int) -> RangeStats:
        """
        Aggregate statistics for samples lo..hi (inclusive).

        Args:
            track: Track to read
            lo: First sample index
            hi: Last sample index

        Returns:
            RangeStats; found is False for an unusable track or range
        """
        if track is None:
            raise ValueError("track is required")

        stats = RangeStats(start_index=lo, end_index=hi)
        samples = track.samples
        if len(samples) < 2 or lo < 0 or hi >= len(samples) or lo > hi:
            return stats

        threshold = self.config.moving_speed_threshold_kmh
        first_elevation = samples[lo].enhanced_elevation()
        stats.min_elevation = first_elevation
        stats.max_elevation = first_elevation

        slope = _SlopeAccumulator()
        sensors = {
            Metric.CADENCE: _MetricAccumulator(),
            Metric.HEART_RATE: _MetricAccumulator(),
            Metric.RESPIRATION_RATE: _MetricAccumulator(),
            Metric.POWER: _MetricAccumulator(),
            Metric.TEMPERATURE: _MetricAccumulator(positive_only=False),
        }

        previous: Optional[Sample] = None
        for index in range(lo, hi + 1):
            sample = samples[index]
            ele = sample.enhanced_elevation()

            stats.min_elevation = min(stats.min_elevation, ele)
            stats.max_elevation = max(stats.max_elevation, ele)

            if previous is not None:
                delta = ele - previous.enhanced_elevation()
                if delta > 0:
                    stats.total_up += delta
                else:
                    stats.total_down += -delta

            slope.add(sample.slope_grade)
            for metric, acc in sensors.items():
                acc.add(sample.metric(metric))

            stats.distance += sample.distance
            stats.duration += sample.duration

            speed = sample.speed()
            stats.max_speed = max(stats.max_speed, speed)
            if speed * 3.6 >= threshold:
                stats.moving_duration += sample.duration
                if stats.min_speed is None or speed < stats.min_speed:
                    stats.min_speed = speed
            else:
                stats.pause_duration += sample.duration

            previous = sample

        if stats.duration > 0:
            stats.average_speed = stats.distance / stats.duration
        if stats.moving_duration > 0:
            stats.average_speed_no_pause = stats.distance / stats.moving_duration

        stats.average_slope = slope.total / slope.count
        stats.min_slope = slope.minimum
        stats.max_slope = slope.maximum

        _apply_sensor(stats, "cadence", sensors[Metric.CADENCE])
        _apply_sensor(stats, "heart_rate", sensors[Metric.HEART_RATE])
        _apply_sensor(stats, "respiration_rate", sensors[Metric.RESPIRATION_RATE])
        _apply_sensor(stats, "power", sensors[Metric.POWER])
        _apply_sensor(stats, "temperature", sensors[Metric.TEMPERATURE])

        stats.found = True
        return stats


def _apply_sensor(stats: RangeStats, name: str, acc: _MetricAccumulator):
    if acc.count == 0:
        return
    setattr(stats, f"average_{name}", acc.average)
    setattr(stats, f"min_{name}", acc.minimum)
    setattr(stats, f"max_{name}", acc.maximum)


def stats_for_range(track: Track, lo: int, hi: int) -> RangeStats:
    """Convenience function for a one-off range query."""
    return RangeAggregator().stats_for_range(track, lo, hi)
