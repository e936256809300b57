"""
Personal records: the biggest climb across workouts and the ranking of stored
distance interval records.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..core.interval_finder import better_interval_record
from ..storage.data_models import (
    ClimbRecord,
    IntervalTarget,
    RankedIntervalRecord,
    StoredIntervalRecord,
    Workout,
)

logger = logging.getLogger(__name__)

CLIMB_KIND = "climb"

# Deterministic total order within one label
_RANK_COLUMNS = ["duration", "distance", "date", "record_id"]
_RANK_ASCENDING = [True, False, True, True]


def biggest_climb(workouts: Iterable[Optional[Workout]]) -> Optional[ClimbRecord]:
    """
    Select the climb with the greatest elevation gain over all workouts.

    Only candidates of kind "climb" qualify. On equal gain the first one
    encountered is kept.
    """
    if workouts is None:
        raise ValueError("workouts are required")

    best: Optional[ClimbRecord] = None
    for workout in workouts:
        if workout is None:
            continue

        for climb in workout.climbs:
            if climb.kind != CLIMB_KIND:
                continue
            if best is not None and climb.gain <= best.elevation_gain:
                continue

            best = ClimbRecord(
                elevation_gain=climb.gain,
                distance=climb.length,
                average_slope=climb.avg_slope,
                start_index=climb.start_index,
                end_index=climb.end_index,
                workout_id=workout.workout_id,
                date=workout.date,
            )

    return best


def filter_records(
    records: Iterable[StoredIntervalRecord],
    user_id: Optional[int] = None,
    workout_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[StoredIntervalRecord]:
    """Keep records matching every given filter; date bounds are inclusive."""
    if records is None:
        raise ValueError("records are required")

    kept = []
    for stored in records:
        if user_id is not None and stored.user_id != user_id:
            continue
        if workout_type is not None and stored.workout_type != workout_type:
            continue

        date = stored.record.date
        if start_date is not None and (date is None or date < start_date):
            continue
        if end_date is not None and (date is None or date > end_date):
            continue

        kept.append(stored)
    return kept


def _records_frame(records: Sequence[StoredIntervalRecord]) -> pd.DataFrame:
    return pd.DataFrame({
        'position': list(range(len(records))),
        'record_id': [r.record_id for r in records],
        'label': [r.record.label for r in records],
        'target_distance': [r.record.target_distance for r in records],
        'duration': [r.record.duration for r in records],
        'distance': [r.record.distance for r in records],
        'workout_id': [r.record.workout_id for r in records],
        # Naive dates are read as UTC
        'date': pd.to_datetime([r.record.date for r in records], utc=True),
    })


def rank_interval_records(
    records: Iterable[StoredIntervalRecord],
    user_id: Optional[int] = None,
    workout_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[RankedIntervalRecord]:
    """
    Rank stored records within their label.

    Order: duration ascending, distance descending, workout date ascending,
    record id ascending. Ranks start at 1 and never tie.

    Returns:
        Ranked records grouped by label, best first within each label
    """
    selected = filter_records(records, user_id, workout_type, start_date, end_date)
    if not selected:
        return []

    df = _records_frame(selected)
    df = df.sort_values(["label"] + _RANK_COLUMNS, ascending=[True] + _RANK_ASCENDING)
    df['rank'] = df.groupby('label').cumcount() + 1

    return [
        RankedIntervalRecord(stored=selected[int(pos)], rank=int(rank))
        for pos, rank in zip(df['position'], df['rank'])
    ]


def best_records_per_label(
    records: Iterable[StoredIntervalRecord],
    targets: Sequence[IntervalTarget],
    user_id: Optional[int] = None,
    workout_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[StoredIntervalRecord]:
    """Best stored record for each target label, in target order.

    Labels without any record are left out, as are records whose label is
    not one of the targets.
    """
    if not targets:
        return []

    selected = filter_records(records, user_id, workout_type, start_date, end_date)
    valid_labels = {t.label for t in targets}

    best = {}
    for stored in selected:
        label = stored.record.label
        if label not in valid_labels:
            continue
        current = best.get(label)
        if current is None or better_interval_record(stored.record, current.record):
            best[label] = stored

    return [best[t.label] for t in targets if t.label in best]


def distance_record_ranking(
    records: Iterable[StoredIntervalRecord],
    label: str,
    targets: Sequence[IntervalTarget],
    limit: int = 0,
    offset: int = 0,
    user_id: Optional[int] = None,
    workout_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Tuple[List[StoredIntervalRecord], int]:
    """
    One page of same-label records, best first.

    Args:
        records: Stored records to rank
        label: Target label to rank
        targets: Targets valid for the workout type
        limit: Page size; 0 means no limit
        offset: Records to skip before the page

    Returns:
        (page, total number of matching records)
    """
    if not targets:
        return [], 0

    if label not in {t.label for t in targets}:
        raise ValueError(f"unknown distance label {label!r}")

    selected = [
        r for r in filter_records(records, user_id, workout_type, start_date, end_date)
        if r.record.label == label
    ]
    total = len(selected)
    if total == 0:
        return [], 0

    df = _records_frame(selected)
    df = df.sort_values(_RANK_COLUMNS, ascending=_RANK_ASCENDING)

    positions = list(df['position'])
    if offset > 0:
        positions = positions[offset:]
    if limit > 0:
        positions = positions[:limit]

    return [selected[int(pos)] for pos in positions], total


def workout_records_with_rank(
    records: Iterable[StoredIntervalRecord],
    workout_id: int,
    user_id: Optional[int] = None,
    workout_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[RankedIntervalRecord]:
    """Records of one workout with their rank among all matching records.

    Ordered by target distance, then duration, then distance descending.
    """
    ranked = rank_interval_records(records, user_id, workout_type, start_date, end_date)
    mine = [r for r in ranked if r.record.workout_id == workout_id]
    mine.sort(key=lambda r: (r.record.target_distance, r.record.duration, -r.record.distance))

    logger.debug("Workout %s has %d ranked records", workout_id, len(mine))
    return mine
