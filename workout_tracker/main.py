"""
Main module for the workout tracker engine.
Provides a high-level interface that runs the full pipeline for one workout.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd

from .core.elevation import HeightModel, PointNormalizer
from .core.interval_finder import IntervalFinder
from .core.processing import raw_points_from_frame
from .core.track_builder import TrackBuilder
from .metrics.breakdown import BreakdownCalculator
from .storage.data_models import (
    ClimbCandidate,
    IntervalTarget,
    RawPoint,
    Workout,
    WorkoutAnalysis,
)
from .utils.config import EngineConfig, get_config
from .utils.workout_types import WORKOUT_TYPES, normalize_workout_type

logger = logging.getLogger(__name__)


class WorkoutTracker:
    """
    Main workout tracker class that orchestrates all components.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 height_model: Optional[HeightModel] = None,
                 use_default_model: bool = True):
        self.config = config or get_config()
        self.config.validate_configuration()

        self.normalizer = PointNormalizer(height_model, self.config, use_default_model)
        self.builder = TrackBuilder(self.normalizer, self.config)
        self.finder = IntervalFinder(self.config)
        self.breakdown = BreakdownCalculator(self.config)

    def targets_for(self, workout_type: str) -> List[IntervalTarget]:
        """Default distance targets for a type plus the configured extra targets."""
        targets = list(WORKOUT_TYPES.distance_record_targets(workout_type))
        known = {t.label for t in targets}
        for label, distance in self.config.records.extra_targets.items():
            if label not in known:
                targets.append(IntervalTarget(label, float(distance)))
        return targets

    def analyze(
        self,
        workout_id: Optional[int],
        date: Optional[datetime],
        workout_type: str,
        points: Iterable[RawPoint],
        creator: str = "",
        climbs: Optional[List[ClimbCandidate]] = None,
        user_id: Optional[int] = None,
        targets: Optional[List[IntervalTarget]] = None,
        with_breakdown: bool = True,
    ) -> WorkoutAnalysis:
        """
        Analyze one workout from its raw points.

        Args:
            workout_id: Identifier copied onto the records
            date: Workout date; the first sample's time when omitted
            workout_type: Workout type name (e.g. "running")
            points: Time-ordered raw points
            creator: Recording device/app
            climbs: Climb candidates from the segmentation stage
            user_id: Owner of the workout
            targets: Distance targets; the type's defaults when omitted
            with_breakdown: Whether to compute the configured breakdown

        Returns:
            WorkoutAnalysis with track, totals, records and breakdown
        """
        if points is None:
            raise ValueError("points are required")

        workout_type = normalize_workout_type(workout_type)
        track = self.builder.build(points, creator)

        workout = Workout(
            workout_id=workout_id,
            date=date if date is not None else track.start,
            workout_type=workout_type,
            track=track,
            climbs=list(climbs or []),
            user_id=user_id,
        )

        if targets is None:
            targets = self.targets_for(workout_type)
        records = self.finder.find(workout, targets)

        center = track.center()
        if center.is_zero():
            center = None

        breakdown = None
        if with_breakdown:
            breakdown = self.breakdown.statistics_per(
                track, self.config.records.breakdown_count, self.config.records.breakdown_unit
            )

        logger.info(
            "Analyzed workout %s (%s): %d samples, %.0f m, %d records",
            workout_id, workout_type, len(track), track.totals.total_distance, len(records),
        )

        return WorkoutAnalysis(
            workout=workout,
            track=track,
            distance_records=records,
            breakdown=breakdown,
            extra_metrics=track.extra_metrics(),
            center=center,
        )

    def analyze_frame(self, df: pd.DataFrame, workout_id: Optional[int], workout_type: str,
                      creator: str = "", **kwargs) -> WorkoutAnalysis:
        """Analyze a workout from a decoded point DataFrame."""
        points = raw_points_from_frame(df, creator)
        return self.analyze(workout_id, kwargs.pop("date", None), workout_type, points,
                            creator=creator, **kwargs)


def process_workout(workout_id: Optional[int], date: Optional[datetime], workout_type: str,
                    points: Iterable[RawPoint], **kwargs) -> WorkoutAnalysis:
    """
    Analyze a single workout with the global configuration.

    Args:
        workout_id: Identifier copied onto the records
        date: Workout date
        workout_type: Workout type name
        points: Time-ordered raw points
        **kwargs: Passed on to WorkoutTracker.analyze

    Returns:
        WorkoutAnalysis
    """
    tracker = WorkoutTracker()
    return tracker.analyze(workout_id, date, workout_type, points, **kwargs)
