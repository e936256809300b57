"""
Workout breakdown: splits a track every N meters/kilometers/miles of distance
or every N seconds/minutes/hours of moving time.
"""
import logging
import math
from typing import List, Optional

from ..storage.data_models import BreakdownItem, Track, WorkoutBreakdown
from ..utils.config import EngineConfig, get_config
from ..utils.workout_types import METER_PER_KM, METER_PER_MILE
from .range_stats import RangeAggregator

logger = logging.getLogger(__name__)

UNIT_DISTANCE = "distance"
UNIT_DURATION = "duration"

# unit -> (split kind, base units per unit)
BREAKDOWN_UNITS = {
    "m": (UNIT_DISTANCE, 1.0),
    "km": (UNIT_DISTANCE, METER_PER_KM),
    "mi": (UNIT_DISTANCE, METER_PER_MILE),
    "sec": (UNIT_DURATION, 1.0),
    "min": (UNIT_DURATION, 60.0),
    "hour": (UNIT_DURATION, 3600.0),
}


def _can_have(item: BreakdownItem, kind: str, count: float, distance: float, duration: float) -> bool:
    limit = item.counter * count
    if kind == UNIT_DISTANCE:
        return item.total_distance + distance < limit
    return item.total_duration + duration < limit


def _next_item(item: BreakdownItem, start_index: int) -> BreakdownItem:
    return BreakdownItem(
        unit_name=item.unit_name,
        unit_count=item.unit_count,
        counter=item.counter + 1,
        start_index=start_index,
        total_distance=item.total_distance,
        total_duration=item.total_duration,
    )


def mark_best_and_worst(items: List[BreakdownItem]):
    """Flag the fastest item as best and the slowest as worst (first wins ties)."""
    if not items:
        return

    best = 0
    worst = 0
    for i, item in enumerate(items):
        if item.speed < items[worst].speed:
            worst = i
        if item.speed > items[best].speed:
            best = i

    items[worst].is_worst = True
    items[best].is_best = True


class BreakdownCalculator:
    """Builds WorkoutBreakdowns from a Track."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()
        self.aggregator = RangeAggregator(self.config)

    def statistics_per(self, track: Track, count: float, unit: str) -> WorkoutBreakdown:
        """
        Split a track into consecutive items of `count` units.

        Args:
            track: Track to split
            count: Size of one item, in `unit`
            unit: One of m, km, mi, sec, min, hour

        Returns:
            WorkoutBreakdown; its items list is empty for an empty track
        """
        if track is None:
            raise ValueError("track is required")
        if unit not in BREAKDOWN_UNITS:
            raise ValueError(f"unknown unit: {unit}")
        if count is None or math.isnan(count) or count <= 0:
            raise ValueError(f"breakdown count must be positive, got {count}")

        breakdown = WorkoutBreakdown(unit=unit)
        if track.is_empty():
            return breakdown

        kind, factor = BREAKDOWN_UNITS[unit]
        size = count * factor
        threshold = self.config.moving_speed_threshold_kmh

        items = []
        current = BreakdownItem(unit_name=kind, unit_count=size, counter=1, start_index=0)

        for i, sample in enumerate(track):
            moving = sample.is_moving(threshold)
            moving_duration = sample.duration if moving else 0.0

            if not _can_have(current, kind, size, sample.distance, moving_duration):
                current.end_index = i
                self._close(track, current)
                items.append(current)
                current = _next_item(current, i)

            current.distance += sample.distance
            current.total_distance += sample.distance
            if moving:
                current.duration += sample.duration
                current.total_duration += sample.duration
            else:
                current.pause_duration += sample.duration

        current.end_index = len(track) - 1
        self._close(track, current)
        items.append(current)

        mark_best_and_worst(items)
        breakdown.items = items

        logger.debug("Breakdown per %s %s: %d items", count, unit, len(items))
        return breakdown

    def _close(self, track: Track, item: BreakdownItem):
        item.calculate_speed()
        stats = self.aggregator.stats_for_range(track, item.start_index, item.end_index)
        if stats.found:
            item.apply_range_stats(stats)


def statistics_per(track: Track, count: float, unit: str) -> WorkoutBreakdown:
    """Convenience function to compute a breakdown."""
    return BreakdownCalculator().statistics_per(track, count, unit)
