"""
Workout Tracker - GPS/sensor workout analysis engine.

Builds tracks from recorded points, aggregates statistics over index ranges,
finds the fastest distance intervals and ranks personal records.
"""

from .main import (
    WorkoutTracker,
    process_workout
)

from .core.track_builder import build_track
from .core.interval_finder import fastest_distances
from .metrics.range_stats import stats_for_range
from .metrics.breakdown import statistics_per
from .metrics.records import biggest_climb, rank_interval_records
from .storage.data_models import (
    RawPoint,
    Sample,
    Track,
    RangeStats,
    IntervalTarget,
    IntervalRecord,
    ClimbCandidate,
    ClimbRecord,
    Workout,
    WorkoutAnalysis
)
from .utils.config import get_config, reset_config

__version__ = "1.0.0"
__author__ = "Workout Tracker"

# Main interface classes
__all__ = [
    # Main interfaces
    "WorkoutTracker",
    "process_workout",

    # Core functionality
    "build_track",
    "fastest_distances",
    "stats_for_range",
    "statistics_per",
    "biggest_climb",
    "rank_interval_records",

    # Data models
    "RawPoint",
    "Sample",
    "Track",
    "RangeStats",
    "IntervalTarget",
    "IntervalRecord",
    "ClimbCandidate",
    "ClimbRecord",
    "Workout",
    "WorkoutAnalysis",

    # Configuration
    "get_config",
    "reset_config"
]
