#!/usr/bin/env python3
"""Point filtering and tag parsing shared by the ingestion adapters."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from ..storage.data_models import Metric, RawPoint

logger = logging.getLogger(__name__)

# Extension/field names seen in GPX, TCX and FIT exports
METRIC_ALIASES: Dict[str, Metric] = {
    "cad": Metric.CADENCE,
    "cadence": Metric.CADENCE,
    "hr": Metric.HEART_RATE,
    "heartrate": Metric.HEART_RATE,
    "heart_rate": Metric.HEART_RATE,
    "heart-rate": Metric.HEART_RATE,
    "power": Metric.POWER,
    "watts": Metric.POWER,
    "atemp": Metric.TEMPERATURE,
    "temp": Metric.TEMPERATURE,
    "temperature": Metric.TEMPERATURE,
    "respiration-rate": Metric.RESPIRATION_RATE,
    "respiration_rate": Metric.RESPIRATION_RATE,
    "respirationrate": Metric.RESPIRATION_RATE,
    "speed": Metric.SPEED,
    "enhanced_speed": Metric.SPEED,
}

_TIME_COLUMNS = ("timestamp", "time")
_LAT_COLUMNS = ("lat", "latitude")
_LNG_COLUMNS = ("lng", "lon", "longitude")
_ELEVATION_COLUMNS = ("elevation", "enhanced_altitude", "altitude")


def is_valid_coordinate(lat: Optional[float], lng: Optional[float]) -> bool:
    """A usable GPS fix: finite, inside range and not the (0, 0) placeholder."""
    if lat is None or lng is None:
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    if lat == 0 and lng == 0:
        return False
    return abs(lat) <= 90 and abs(lng) <= 180


def filter_points(points: Iterable[RawPoint]) -> List[RawPoint]:
    """Drop points without a usable coordinate, keeping order."""
    kept = []
    dropped = 0
    for p in points:
        if is_valid_coordinate(p.lat, p.lng):
            kept.append(p)
        else:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d points with degenerate coordinates", dropped)
    return kept


def parse_metric_value(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_metric_tags(tags: Mapping[str, Any]) -> Dict[Metric, float]:
    """Parse raw string-keyed tags into the known metric set.

    Unknown keys and unparseable values are left out; nothing is defaulted.
    """
    metrics: Dict[Metric, float] = {}
    for key, value in tags.items():
        metric = METRIC_ALIASES.get(str(key).strip().lower())
        if metric is None:
            continue

        parsed = parse_metric_value(value)
        if parsed is None:
            continue

        metrics[metric] = parsed
    return metrics


def _first_column(df: pd.DataFrame, candidates) -> Optional[str]:
    for col in candidates:
        if col in df.columns:
            return col
    return None


def raw_points_from_frame(df: pd.DataFrame, creator: str = "") -> List[RawPoint]:
    """Convert a decoded point DataFrame into ordered, filtered raw points.

    - Time comes from a 'timestamp'/'time' column or a DatetimeIndex
    - Rows are sorted by time; duplicate timestamps keep the first row
    - Rows without a usable coordinate are dropped
    - Every column matching a known metric alias becomes a tag
    """
    if df.empty:
        return []

    lat_col = _first_column(df, _LAT_COLUMNS)
    lng_col = _first_column(df, _LNG_COLUMNS)
    if lat_col is None or lng_col is None:
        raise ValueError("Point frame needs latitude and longitude columns")

    frame = df.copy()

    time_col = _first_column(frame, _TIME_COLUMNS)
    if time_col is not None:
        frame["_time"] = pd.to_datetime(frame[time_col], errors="coerce")
    elif isinstance(frame.index, pd.DatetimeIndex):
        frame["_time"] = frame.index
    else:
        frame["_time"] = pd.NaT

    frame = frame.reset_index(drop=True)
    if frame["_time"].notna().any():
        frame = frame.sort_values("_time", kind="stable")
        has_time = frame["_time"].notna()
        duplicated = frame["_time"].duplicated(keep="first") & has_time
        frame = frame[~duplicated]

    lat = pd.to_numeric(frame[lat_col], errors="coerce").to_numpy(dtype=float)
    lng = pd.to_numeric(frame[lng_col], errors="coerce").to_numpy(dtype=float)
    valid = np.array([is_valid_coordinate(a, b) for a, b in zip(lat, lng)], dtype=bool)
    if not valid.all():
        logger.debug("Dropped %d rows with degenerate coordinates", int((~valid).sum()))
    frame = frame[valid]

    ele_col = _first_column(frame, _ELEVATION_COLUMNS)
    tag_cols = [c for c in frame.columns if str(c).lower() in METRIC_ALIASES]

    points = []
    for _, row in frame.iterrows():
        ts = row["_time"]
        elevation = parse_metric_value(row[ele_col]) if ele_col is not None else None
        tags = {c: row[c] for c in tag_cols if not pd.isna(row[c])}
        points.append(RawPoint(
            time=None if pd.isna(ts) else pd.Timestamp(ts).to_pydatetime(),
            lat=float(row[lat_col]),
            lng=float(row[lng_col]),
            elevation=elevation,
            creator=creator,
            tags=tags,
        ))

    return points
