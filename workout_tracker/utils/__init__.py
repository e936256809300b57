"""Utility modules for configuration and the workout type table."""

from .config import (
    EngineConfig,
    ProcessingSettings,
    ElevationSettings,
    RecordSettings,
    get_config,
    reset_config
)
from .workout_types import WORKOUT_TYPES, WorkoutTypeTable

__all__ = [
    "EngineConfig",
    "ProcessingSettings",
    "ElevationSettings",
    "RecordSettings",
    "get_config",
    "reset_config",
    "WORKOUT_TYPES",
    "WorkoutTypeTable"
]
