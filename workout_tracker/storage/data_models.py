"""
Data models for the workout tracker engine.
Defines the structure for samples, tracks, aggregate statistics and records.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Optional, Any, Tuple, Iterator

import pandas as pd


class Metric(str, Enum):
    """Auxiliary sensor metrics a sample may carry."""
    CADENCE = "cadence"
    HEART_RATE = "heart-rate"
    RESPIRATION_RATE = "respiration-rate"
    POWER = "power"
    TEMPERATURE = "temperature"
    SPEED = "speed"


@dataclass(frozen=True)
class RawPoint:
    """One decoded point as handed over by the ingestion side."""
    time: Optional[datetime]
    lat: float
    lng: float
    elevation: Optional[float] = None
    creator: str = ""
    tags: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Sample:
    """One recorded instant of a track, with its deltas and running totals."""
    time: Optional[datetime]
    lat: float
    lng: float
    elevation: Optional[float] = None
    creator: str = ""
    corrected_elevation: Optional[float] = None

    # Deltas from the previous sample (zero for the first one)
    distance: float = 0.0
    distance_2d: float = 0.0
    duration: float = 0.0  # seconds

    # Running totals up to and including this sample
    total_distance: float = 0.0
    total_distance_2d: float = 0.0
    total_duration: float = 0.0

    slope_grade: float = 0.0
    metrics: Mapping[Metric, float] = field(default_factory=dict)

    def enhanced_elevation(self) -> float:
        """Corrected elevation, falling back to the raw elevation."""
        if self.corrected_elevation is not None and not math.isnan(self.corrected_elevation):
            return self.corrected_elevation
        if self.elevation is None or math.isnan(self.elevation):
            return 0.0
        return self.elevation

    def metric(self, metric: Metric) -> Optional[float]:
        return self.metrics.get(metric)

    def average_speed(self) -> float:
        """Speed derived from the distance/duration deltas (m/s)."""
        if self.duration == 0:
            return 0.0
        return self.distance / self.duration

    def speed(self) -> float:
        """Reported speed when present and positive, else the derived one."""
        reported = self.metrics.get(Metric.SPEED)
        if reported is not None and not math.isnan(reported) and reported > 0:
            return reported
        return self.average_speed()

    def is_moving(self, threshold_kmh: float = 1.0) -> bool:
        return self.speed() * 3.6 >= threshold_kmh


@dataclass(frozen=True)
class MapCenter:
    lat: float = 0.0
    lng: float = 0.0

    def is_zero(self) -> bool:
        return self.lat == 0 and self.lng == 0


@dataclass(frozen=True)
class TrackTotals:
    """Workout-level totals derived while building a track."""
    total_distance: float = 0.0
    total_distance_2d: float = 0.0
    total_duration: float = 0.0
    pause_duration: float = 0.0
    min_elevation: float = 0.0
    max_elevation: float = 0.0
    total_up: float = 0.0
    total_down: float = 0.0
    average_speed: float = 0.0
    average_speed_no_pause: float = 0.0
    max_speed: float = 0.0

    @property
    def moving_duration(self) -> float:
        return self.total_duration - self.pause_duration

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            'total_distance': self.total_distance,
            'total_distance_2d': self.total_distance_2d,
            'total_duration': self.total_duration,
            'pause_duration': self.pause_duration,
            'min_elevation': self.min_elevation,
            'max_elevation': self.max_elevation,
            'total_up': self.total_up,
            'total_down': self.total_down,
            'average_speed': self.average_speed,
            'average_speed_no_pause': self.average_speed_no_pause,
            'max_speed': self.max_speed
        }


@dataclass(frozen=True)
class Track:
    """Ordered, time-ascending samples of one workout. Never mutated once built."""
    samples: Tuple[Sample, ...] = ()
    totals: TrackTotals = field(default_factory=TrackTotals)
    creator: str = ""

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    def is_empty(self) -> bool:
        return not self.samples

    @property
    def start(self) -> Optional[datetime]:
        return self.samples[0].time if self.samples else None

    @property
    def stop(self) -> Optional[datetime]:
        return self.samples[-1].time if self.samples else None

    def extra_metrics(self) -> List[str]:
        """Sorted names of the auxiliary metrics present anywhere in the track."""
        found = set()
        for sample in self.samples:
            found.update(m.value for m in sample.metrics)
        return sorted(found)

    def center(self) -> MapCenter:
        """Mean coordinate of all samples."""
        if not self.samples:
            return MapCenter()

        size = float(len(self.samples))
        lat = sum(s.lat for s in self.samples)
        lng = sum(s.lng for s in self.samples)
        return MapCenter(lat=lat / size, lng=lng / size)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per sample; metric columns are NaN where absent."""
        columns = [
            'time', 'lat', 'lng', 'elevation', 'corrected_elevation',
            'distance', 'distance_2d', 'duration',
            'total_distance', 'total_distance_2d', 'total_duration', 'slope_grade',
        ] + [m.value for m in Metric]

        rows = []
        for s in self.samples:
            row = {
                'time': s.time,
                'lat': s.lat,
                'lng': s.lng,
                'elevation': s.elevation,
                'corrected_elevation': s.corrected_elevation,
                'distance': s.distance,
                'distance_2d': s.distance_2d,
                'duration': s.duration,
                'total_distance': s.total_distance,
                'total_distance_2d': s.total_distance_2d,
                'total_duration': s.total_duration,
                'slope_grade': s.slope_grade,
            }
            for m in Metric:
                row[m.value] = s.metrics.get(m, float('nan'))
            rows.append(row)

        return pd.DataFrame(rows, columns=columns)


@dataclass
class AggregateStats:
    """Aggregate statistics; metric values are None when absent throughout."""
    # Elevation
    min_elevation: float = 0.0
    max_elevation: float = 0.0
    total_up: float = 0.0
    total_down: float = 0.0

    # Slope
    average_slope: float = 0.0
    min_slope: float = 0.0
    max_slope: float = 0.0

    # Speed
    average_speed: float = 0.0
    average_speed_no_pause: float = 0.0
    max_speed: float = 0.0
    min_speed: Optional[float] = None

    # Sensor metrics
    average_cadence: Optional[float] = None
    min_cadence: Optional[float] = None
    max_cadence: Optional[float] = None

    average_heart_rate: Optional[float] = None
    min_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None

    average_respiration_rate: Optional[float] = None
    min_respiration_rate: Optional[float] = None
    max_respiration_rate: Optional[float] = None

    average_power: Optional[float] = None
    min_power: Optional[float] = None
    max_power: Optional[float] = None

    average_temperature: Optional[float] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None


@dataclass
class RangeStats(AggregateStats):
    """Aggregate statistics plus totals for one inclusive index range."""
    found: bool = False
    start_index: int = 0
    end_index: int = 0

    distance: float = 0.0
    duration: float = 0.0  # including pauses
    moving_duration: float = 0.0
    pause_duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return dict(self.__dict__)


@dataclass(frozen=True)
class IntervalTarget:
    label: str
    target_distance: float  # meters


@dataclass
class IntervalRecord:
    """Best (shortest moving duration) window found for one target distance."""
    label: str
    target_distance: float
    distance: float
    duration: float  # moving seconds
    average_speed: float
    start_index: int
    end_index: int
    workout_id: Optional[int] = None
    date: Optional[datetime] = None
    found: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            'label': self.label,
            'target_distance': self.target_distance,
            'distance': self.distance,
            'duration_seconds': self.duration,
            'average_speed': self.average_speed,
            'start_index': self.start_index,
            'end_index': self.end_index,
            'workout_id': self.workout_id,
            'date': self.date.isoformat() if self.date else None,
        }


@dataclass
class StoredIntervalRecord:
    """An interval record as kept by the persistence side."""
    record_id: int
    record: IntervalRecord
    user_id: Optional[int] = None
    workout_type: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data['date'] = self.record.date
        data.update({
            'record_id': self.record_id,
            'user_id': self.user_id,
            'workout_type': self.workout_type,
        })
        return data


@dataclass
class RankedIntervalRecord:
    stored: StoredIntervalRecord
    rank: int

    @property
    def record(self) -> IntervalRecord:
        return self.stored.record


@dataclass(frozen=True)
class ClimbCandidate:
    """A pre-segmented stretch of terrain, produced upstream."""
    gain: float
    length: float
    avg_slope: float
    start_index: int
    end_index: int
    kind: str = "climb"


@dataclass
class ClimbRecord:
    elevation_gain: float
    distance: float
    average_slope: float
    start_index: int
    end_index: int
    workout_id: Optional[int] = None
    date: Optional[datetime] = None
    found: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            'elevation_gain': self.elevation_gain,
            'distance': self.distance,
            'average_slope': self.average_slope,
            'start_index': self.start_index,
            'end_index': self.end_index,
            'workout_id': self.workout_id,
            'date': self.date.isoformat() if self.date else None,
        }


@dataclass
class Workout:
    """A workout as seen by the engine: identity, its track and climb candidates."""
    workout_id: Optional[int]
    date: Optional[datetime]
    workout_type: str = ""
    track: Optional[Track] = None
    climbs: List[ClimbCandidate] = field(default_factory=list)
    user_id: Optional[int] = None


@dataclass
class BreakdownItem:
    """One split of a workout breakdown."""
    unit_name: str
    unit_count: float
    counter: int
    start_index: int = 0
    end_index: int = 0

    distance: float = 0.0
    total_distance: float = 0.0
    duration: float = 0.0  # moving seconds
    total_duration: float = 0.0  # moving seconds, cumulative
    pause_duration: float = 0.0
    speed: float = 0.0

    min_elevation: float = 0.0
    max_elevation: float = 0.0
    total_up: float = 0.0
    total_down: float = 0.0

    average_speed_no_pause: float = 0.0
    max_speed: float = 0.0

    average_cadence: Optional[float] = None
    max_cadence: Optional[float] = None
    average_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    average_power: Optional[float] = None
    max_power: Optional[float] = None

    is_best: bool = False
    is_worst: bool = False

    def calculate_speed(self):
        if self.duration == 0:
            self.speed = 0.0
            return
        self.speed = self.distance / self.duration

    def apply_range_stats(self, stats: RangeStats):
        self.min_elevation = stats.min_elevation
        self.max_elevation = stats.max_elevation
        self.total_up = stats.total_up
        self.total_down = stats.total_down

        self.average_speed_no_pause = stats.average_speed_no_pause
        self.speed = stats.average_speed_no_pause
        self.max_speed = stats.max_speed

        self.average_cadence = stats.average_cadence
        self.max_cadence = stats.max_cadence
        self.average_heart_rate = stats.average_heart_rate
        self.max_heart_rate = stats.max_heart_rate
        self.average_power = stats.average_power
        self.max_power = stats.max_power

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class WorkoutBreakdown:
    unit: str
    items: List[BreakdownItem] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([item.to_dict() for item in self.items])


@dataclass
class WorkoutAnalysis:
    """Everything the engine derives for one workout."""
    workout: Workout
    track: Track
    distance_records: List[IntervalRecord] = field(default_factory=list)
    breakdown: Optional[WorkoutBreakdown] = None
    extra_metrics: List[str] = field(default_factory=list)
    # None when the track has no location
    center: Optional[MapCenter] = None

    @property
    def totals(self) -> TrackTotals:
        return self.track.totals
