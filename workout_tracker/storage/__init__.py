"""Data models exchanged with the ingestion and persistence collaborators."""

from .data_models import (
    Metric,
    RawPoint,
    Sample,
    Track,
    TrackTotals,
    AggregateStats,
    RangeStats,
    IntervalTarget,
    IntervalRecord,
    StoredIntervalRecord,
    RankedIntervalRecord,
    ClimbCandidate,
    ClimbRecord,
    Workout,
    BreakdownItem,
    WorkoutBreakdown,
    WorkoutAnalysis
)

__all__ = [
    "Metric",
    "RawPoint",
    "Sample",
    "Track",
    "TrackTotals",
    "AggregateStats",
    "RangeStats",
    "IntervalTarget",
    "IntervalRecord",
    "StoredIntervalRecord",
    "RankedIntervalRecord",
    "ClimbCandidate",
    "ClimbRecord",
    "Workout",
    "BreakdownItem",
    "WorkoutBreakdown",
    "WorkoutAnalysis"
]
