"""Metrics modules for range statistics, breakdowns and personal records."""

from .range_stats import RangeAggregator, stats_for_range
from .breakdown import BreakdownCalculator, statistics_per
from .records import (
    biggest_climb,
    rank_interval_records,
    best_records_per_label,
    distance_record_ranking,
    workout_records_with_rank
)

__all__ = [
    "RangeAggregator",
    "stats_for_range",
    "BreakdownCalculator",
    "statistics_per",
    "biggest_climb",
    "rank_interval_records",
    "best_records_per_label",
    "distance_record_ranking",
    "workout_records_with_rank"
]
