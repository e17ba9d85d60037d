# app/services/punch_grouping.py
from __future__ import annotations

from collections import defaultdict
from datetime import date, timezone, tzinfo
from typing import Dict, Iterable, List

from app.schemas.attendance import PunchEvent
from app.services.timestamps import as_instant, to_local

# user_id -> local day -> punches of that day, oldest first
GroupedPunches = Dict[str, Dict[date, List[PunchEvent]]]


def group_punches(
    events: Iterable[PunchEvent],
    tz: tzinfo = timezone.utc,
) -> GroupedPunches:
    """
    Partition raw punches by user and local calendar day.

    Steps
    -----
    1) Normalize every timestamp to an aware datetime in `tz`. The first
       unparseable timestamp raises InvalidTimestampError and aborts the
       whole grouping.
    2) Bucket by (user_id, local date). Two punches one millisecond apart
       on either side of local midnight land in different buckets.
    3) Sort each bucket by instant ascending (UTC, so a DST fall-back hour
       orders correctly). The sort is stable, so punches with identical
       timestamps keep their input order.

    Users without punches get no entry and no day ever maps to an empty list.

    Returns
    -------
    GroupedPunches
        Normalized copies of the events; the inputs are left untouched.
    """
    grouped: Dict[str, Dict[date, List[PunchEvent]]] = defaultdict(
        lambda: defaultdict(list)
    )

    for event in events:
        local_ts = to_local(event.timestamp, tz, event_id=event.id)
        normalized = event.model_copy(update={"timestamp": local_ts})
        grouped[event.user_id][local_ts.date()].append(normalized)

    result: GroupedPunches = {}
    for user_id, days in grouped.items():
        result[user_id] = {
            day: sorted(punches, key=lambda p: as_instant(p.timestamp))
            for day, punches in days.items()
        }
    return result
