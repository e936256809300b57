"""Workout type table: which kind of data each workout type carries.

The table is built once, at import time, from the static configuration
below and never changes afterwards. Lookups by class are precomputed.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from ..storage.data_models import IntervalTarget

WORKOUT_TYPE_UNKNOWN = "unknown"

CLASS_LOCATION = "location"
CLASS_DISTANCE = "distance"
CLASS_REPETITION = "repetition"
CLASS_WEIGHT = "weight"
CLASS_DURATION = "duration"

METER_PER_KM = 1000.0
METER_PER_MILE = 1609.344


@dataclass(frozen=True)
class WorkoutTypeConfiguration:
    location: bool = False
    distance: bool = False
    repetition: bool = False
    weight: bool = False


_RUNNING_TARGETS: Tuple[IntervalTarget, ...] = (
    IntervalTarget("400 m", 400.0),
    IntervalTarget("1 km", METER_PER_KM),
    IntervalTarget("1 mile", METER_PER_MILE),
    IntervalTarget("3 km", 3 * METER_PER_KM),
    IntervalTarget("5 km", 5 * METER_PER_KM),
    IntervalTarget("10 km", 10 * METER_PER_KM),
    IntervalTarget("15 km", 15 * METER_PER_KM),
    IntervalTarget("Half marathon", 21097.5),
    IntervalTarget("Marathon", 42195.0),
)

_CYCLING_TARGETS: Tuple[IntervalTarget, ...] = (
    IntervalTarget("5 km", 5 * METER_PER_KM),
    IntervalTarget("10 km", 10 * METER_PER_KM),
    IntervalTarget("20 km", 20 * METER_PER_KM),
    IntervalTarget("40 km", 40 * METER_PER_KM),
    IntervalTarget("50 km", 50 * METER_PER_KM),
    IntervalTarget("100 km", 100 * METER_PER_KM),
    IntervalTarget("160 km", 160 * METER_PER_KM),
)

_WALKING_TARGETS: Tuple[IntervalTarget, ...] = (
    IntervalTarget("1 km", METER_PER_KM),
    IntervalTarget("5 km", 5 * METER_PER_KM),
    IntervalTarget("10 km", 10 * METER_PER_KM),
)

_SWIMMING_TARGETS: Tuple[IntervalTarget, ...] = (
    IntervalTarget("100 m", 100.0),
    IntervalTarget("400 m", 400.0),
    IntervalTarget("1 km", METER_PER_KM),
)

_LOCATION_DISTANCE = WorkoutTypeConfiguration(location=True, distance=True)

WORKOUT_TYPE_CONFIGS: Dict[str, WorkoutTypeConfiguration] = {
    "running": _LOCATION_DISTANCE,
    "cycling": _LOCATION_DISTANCE,
    "e-cycling": _LOCATION_DISTANCE,
    "walking": _LOCATION_DISTANCE,
    "hiking": _LOCATION_DISTANCE,
    "inline-skating": _LOCATION_DISTANCE,
    "skiing": _LOCATION_DISTANCE,
    "snowboarding": _LOCATION_DISTANCE,
    "kayaking": _LOCATION_DISTANCE,
    "rowing": _LOCATION_DISTANCE,
    "swimming": WorkoutTypeConfiguration(distance=True),
    "golfing": WorkoutTypeConfiguration(location=True),
    "horse-riding": _LOCATION_DISTANCE,
    "weight-lifting": WorkoutTypeConfiguration(repetition=True, weight=True),
    "push-ups": WorkoutTypeConfiguration(repetition=True),
    "squats": WorkoutTypeConfiguration(repetition=True, weight=True),
    "yoga": WorkoutTypeConfiguration(),
    "other": WorkoutTypeConfiguration(),
}

DISTANCE_RECORD_TARGETS: Dict[str, Tuple[IntervalTarget, ...]] = {
    "running": _RUNNING_TARGETS,
    "walking": _WALKING_TARGETS,
    "hiking": _WALKING_TARGETS,
    "cycling": _CYCLING_TARGETS,
    "e-cycling": _CYCLING_TARGETS,
    "inline-skating": _CYCLING_TARGETS,
    "swimming": _SWIMMING_TARGETS,
}


class WorkoutTypeTable:
    """Read-only lookup table over workout type configurations."""

    def __init__(
        self,
        configs: Mapping[str, WorkoutTypeConfiguration],
        targets: Mapping[str, Tuple[IntervalTarget, ...]],
    ) -> None:
        self._configs = MappingProxyType(dict(configs))
        self._targets = MappingProxyType({k: tuple(v) for k, v in targets.items()})

        by_class = {
            CLASS_LOCATION: self._select(lambda c: c.location),
            CLASS_DISTANCE: self._select(lambda c: c.distance),
            CLASS_REPETITION: self._select(lambda c: c.repetition),
            CLASS_WEIGHT: self._select(lambda c: c.weight),
            # Every known type stores a duration
            CLASS_DURATION: self._select(lambda c: True),
        }
        self._by_class = MappingProxyType(by_class)

    def _select(self, predicate) -> Tuple[str, ...]:
        return tuple(sorted(k for k, c in self._configs.items() if predicate(c)))

    def workout_types(self) -> Tuple[str, ...]:
        return self._by_class[CLASS_DURATION]

    def types_for_class(self, workout_class: str) -> Tuple[str, ...]:
        if workout_class not in self._by_class:
            raise ValueError(f"Unknown workout type class: {workout_class}")
        return self._by_class[workout_class]

    def configuration(self, workout_type: str) -> WorkoutTypeConfiguration:
        return self._configs.get(workout_type, WorkoutTypeConfiguration())

    def is_distance(self, workout_type: str) -> bool:
        return self.configuration(workout_type).distance

    def is_location(self, workout_type: str) -> bool:
        return self.configuration(workout_type).location

    def is_repetition(self, workout_type: str) -> bool:
        return self.configuration(workout_type).repetition

    def is_weight(self, workout_type: str) -> bool:
        return self.configuration(workout_type).weight

    def is_duration(self, workout_type: str) -> bool:
        return workout_type in self._configs

    def distance_record_targets(self, workout_type: str) -> Tuple[IntervalTarget, ...]:
        """Default distance-interval targets for a workout type (may be empty)."""
        return self._targets.get(workout_type, ())


def normalize_workout_type(workout_type: str) -> str:
    if not workout_type:
        return WORKOUT_TYPE_UNKNOWN
    return workout_type


WORKOUT_TYPES = WorkoutTypeTable(WORKOUT_TYPE_CONFIGS, DISTANCE_RECORD_TARGETS)


def distance_record_targets_for(workout_type: str) -> Tuple[IntervalTarget, ...]:
    return WORKOUT_TYPES.distance_record_targets(workout_type)
