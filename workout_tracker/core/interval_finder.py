#!/usr/bin/env python3
"""
Distance interval finder.

For each target distance, finds the contiguous window of samples covering at
least that distance in the least moving time, using prefix sums and a
two-pointer sweep.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Union

import numpy as np

from ..storage.data_models import IntervalRecord, IntervalTarget, Track, Workout
from ..utils.config import EngineConfig, get_config

logger = logging.getLogger(__name__)


def better_interval_record(candidate: IntervalRecord, best: IntervalRecord) -> bool:
    """Shorter duration wins; on equal duration the longer distance wins."""
    if candidate.duration == best.duration:
        return candidate.distance > best.distance
    return candidate.duration < best.duration


class IntervalFinder:
    """Finds the fastest window per target distance on a Track."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()

    def _prefix_sums(self, track: Track):
        threshold = self.config.moving_speed_threshold_kmh
        distances = np.array([s.distance for s in track], dtype=float)
        moving = np.array(
            [s.duration if s.is_moving(threshold) else 0.0 for s in track],
            dtype=float,
        )

        prefix_distance = np.concatenate(([0.0], np.cumsum(distances)))
        prefix_moving = np.concatenate(([0.0], np.cumsum(moving)))
        return prefix_distance, prefix_moving

    def find(self, source: Union[Workout, Track],
             targets: Iterable[IntervalTarget]) -> List[IntervalRecord]:
        """
        Find the fastest interval for every target.

        Args:
            source: Workout (its id and date are copied onto records) or bare Track
            targets: Target distances to search for

        Returns:
            One IntervalRecord per target that has a qualifying window,
            in target order
        """
        if source is None:
            raise ValueError("workout or track is required")

        workout_id = None
        date = None
        if isinstance(source, Workout):
            track = source.track
            workout_id = source.workout_id
            date = source.date
        else:
            track = source

        targets = list(targets)
        for target in targets:
            if math.isnan(target.target_distance) or target.target_distance < 0:
                raise ValueError(f"Invalid target distance for {target.label}: {target.target_distance}")

        if track is None or len(track) < 2:
            return []

        prefix_distance, prefix_moving = self._prefix_sums(track)
        size = len(track)

        results = []
        for target in targets:
            best: Optional[IntervalRecord] = None
            start = 0
            for end in range(size):
                while start <= end and prefix_distance[end + 1] - prefix_distance[start] >= target.target_distance:
                    dist = float(prefix_distance[end + 1] - prefix_distance[start])
                    dur = float(prefix_moving[end + 1] - prefix_moving[start])

                    if dur <= 0:
                        start += 1
                        continue

                    candidate = IntervalRecord(
                        label=target.label,
                        target_distance=target.target_distance,
                        distance=dist,
                        duration=dur,
                        average_speed=dist / dur,
                        start_index=start,
                        end_index=end,
                        workout_id=workout_id,
                        date=date,
                    )
                    if best is None or better_interval_record(candidate, best):
                        best = candidate

                    start += 1

            if best is None:
                logger.debug("No qualifying window for target %s", target.label)
                continue
            results.append(best)

        return results


def fastest_distances(source: Union[Workout, Track], targets: Iterable[IntervalTarget],
                      config: Optional[EngineConfig] = None) -> List[IntervalRecord]:
    """Convenience function to find interval records."""
    return IntervalFinder(config).find(source, targets)
