# app/services/reconciliation.py
from __future__ import annotations

import logging
from datetime import date as date_type, timezone, tzinfo
from typing import Iterable

from app.schemas.attendance import PunchEvent, ReconciliationResult, RosterUser
from app.services.attendance_stats import compute_org_stats, compute_user_stats
from app.services.punch_grouping import group_punches
from app.services.session_pairing import pair_sessions, sort_for_display

logger = logging.getLogger(__name__)


def reconcile(
    events: Iterable[PunchEvent],
    users: Iterable[RosterUser],
    today: date_type,
    tz: tzinfo = timezone.utc,
) -> ReconciliationResult:
    """
    Turn a raw punch snapshot into sessions and attendance statistics.

    Pipeline
    --------
    1) Group punches by user and local calendar day (in `tz`).
    2) Pair check-ins with check-outs per day into sessions.
    3) Aggregate sessions into per-user and organization-wide stats.

    The computation is pure: it reads no clock (`today` is explicit),
    performs no I/O and keeps no state between calls, so identical inputs
    always give identical results and concurrent calls need no locking.

    Raises
    ------
    InvalidTimestampError
        If any punch has a missing or unparseable timestamp. No partial
        result is produced in that case.

    Returns
    -------
    ReconciliationResult
        Empty inputs give empty sessions and zeroed stats. Punches of users
        absent from the roster are skipped and listed in `anomalies`.
    """
    roster = list(users)

    grouped = group_punches(events, tz)
    sessions, anomalies = pair_sessions(grouped, roster)
    sessions = sort_for_display(sessions)

    user_stats = compute_user_stats(sessions, roster, today)
    org_stats = compute_org_stats(sessions, roster, user_stats, today)

    logger.debug(
        "Reconciled %d session(s) for %d user(s) on %s (%d anomaly(ies))",
        len(sessions),
        len(roster),
        today.isoformat(),
        len(anomalies),
    )

    return ReconciliationResult(
        today=today,
        sessions=sessions,
        user_stats=user_stats,
        org_stats=org_stats,
        anomalies=anomalies,
    )


class ReconciliationEngine:
    """
    Binds the local timezone for callers that reconcile repeatedly.

    Holds configuration only; every call to `run` is independent.
    """

    def __init__(self, tz: tzinfo = timezone.utc) -> None:
        self.tz = tz

    def run(
        self,
        events: Iterable[PunchEvent],
        users: Iterable[RosterUser],
        today: date_type,
    ) -> ReconciliationResult:
        return reconcile(events, users, today, tz=self.tz)
