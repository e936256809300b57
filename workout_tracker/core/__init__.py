"""Core processing modules for point normalization, track building and interval search."""

from .elevation import EGM96HeightModel, PointNormalizer, correct_elevation
from .processing import filter_points, is_valid_coordinate, raw_points_from_frame
from .track_builder import TrackBuilder, build_track
from .interval_finder import IntervalFinder, fastest_distances

__all__ = [
    "EGM96HeightModel",
    "PointNormalizer",
    "correct_elevation",
    "filter_points",
    "is_valid_coordinate",
    "raw_points_from_frame",
    "TrackBuilder",
    "build_track",
    "IntervalFinder",
    "fastest_distances"
]
