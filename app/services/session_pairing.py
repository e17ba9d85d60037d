# app/services/session_pairing.py
from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from app.schemas.attendance import (
    AnomalyKind,
    AttendanceSession,
    PunchEvent,
    PunchKind,
    ReconciliationAnomaly,
    RosterUser,
)
from app.services.punch_grouping import GroupedPunches
from app.services.timestamps import as_instant

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def duration_minutes(check_in: PunchEvent, check_out: PunchEvent) -> int:
    """
    Whole minutes of elapsed real time between two normalized punches,
    rounded half up (89.5 seconds -> 1 minute, 90 seconds -> 2 minutes).
    Measured on UTC instants so DST transitions inside the session count.
    """
    elapsed = as_instant(check_out.timestamp) - as_instant(check_in.timestamp)  # type: ignore[arg-type]
    seconds = elapsed.total_seconds()
    return int(math.floor(seconds / 60.0 + 0.5))


class SessionPairer:
    """
    Reconstructs work sessions from the ordered punches of one user's day.

    Rules
    -----
    1) Check-ins are visited in timestamp order. Each one claims the
       earliest not-yet-claimed check-out strictly later than itself,
       even when other check-ins sit in between (greedy, first-come).
    2) A check-in with nothing left to claim becomes an open session.
    3) Check-outs nobody claimed become orphan sessions, emitted after
       all check-in sessions in timestamp order.
    4) Check-outs with identical timestamps are claimed in input order.

    Note
    ----
    The greedy policy is not interval-optimal. With two check-ins before a
    single check-out, the *first* check-in gets the check-out and the
    second stays open. Historical hour totals depend on this pairing, so
    it is kept as is.
    """

    def __init__(self, user: RosterUser) -> None:
        self.user = user

    def pair_day(self, day: date, punches: Sequence[PunchEvent]) -> List[AttendanceSession]:
        """
        Pair the punches of a single day. `punches` must be sorted ascending.
        """
        ordered: Tuple[PunchEvent, ...] = tuple(punches)
        claimed: Set[int] = set()
        sessions: List[AttendanceSession] = []

        for punch in ordered:
            if punch.kind is not PunchKind.CHECK_IN:
                continue

            match_idx = self._earliest_check_out_after(ordered, claimed, punch)
            if match_idx is None:
                sessions.append(self._session(day, check_in=punch))
                continue

            claimed.add(match_idx)
            check_out = ordered[match_idx]
            sessions.append(
                self._session(
                    day,
                    check_in=punch,
                    check_out=check_out,
                    duration=duration_minutes(punch, check_out),
                )
            )

        for idx, punch in enumerate(ordered):
            if punch.kind is PunchKind.CHECK_OUT and idx not in claimed:
                sessions.append(self._session(day, check_out=punch))

        return sessions

    @staticmethod
    def _earliest_check_out_after(
        ordered: Tuple[PunchEvent, ...],
        claimed: Set[int],
        check_in: PunchEvent,
    ) -> Optional[int]:
        start = as_instant(check_in.timestamp)  # type: ignore[arg-type]
        for idx, candidate in enumerate(ordered):
            if idx in claimed or candidate.kind is not PunchKind.CHECK_OUT:
                continue
            if as_instant(candidate.timestamp) > start:  # type: ignore[arg-type]
                return idx
        return None

    def _session(
        self,
        day: date,
        check_in: PunchEvent | None = None,
        check_out: PunchEvent | None = None,
        duration: int | None = None,
    ) -> AttendanceSession:
        return AttendanceSession(
            user_id=self.user.id,
            user_name=self.user.name or UNKNOWN,
            user_email=self.user.email or UNKNOWN,
            date=day,
            check_in=check_in,
            check_out=check_out,
            duration_minutes=duration,
        )


def pair_sessions(
    grouped: GroupedPunches,
    roster: Iterable[RosterUser],
) -> Tuple[List[AttendanceSession], List[ReconciliationAnomaly]]:
    """
    Run the pairing over every (user, day) bucket.

    Punches of users missing from the roster produce no sessions. Each of
    them is reported as an UNKNOWN_USER anomaly instead of failing the run,
    since a user may have been deleted after punching.
    """
    users_by_id: Dict[str, RosterUser] = {user.id: user for user in roster}
    sessions: List[AttendanceSession] = []
    anomalies: List[ReconciliationAnomaly] = []

    for user_id, days in grouped.items():
        user = users_by_id.get(user_id)
        if user is None:
            for punches in days.values():
                for punch in punches:
                    anomalies.append(
                        ReconciliationAnomaly(
                            kind=AnomalyKind.UNKNOWN_USER,
                            event_id=punch.id,
                            user_id=user_id,
                            message=f"User '{user_id}' is not in the roster; punch skipped.",
                        )
                    )
            logger.warning(
                "Skipping punches of unknown user %s (%d day(s))", user_id, len(days)
            )
            continue

        pairer = SessionPairer(user)
        for day, punches in days.items():
            sessions.extend(pairer.pair_day(day, punches))

    return sessions, anomalies


def sort_for_display(sessions: Iterable[AttendanceSession]) -> List[AttendanceSession]:
    """
    Most recent date first; within a date, latest activity first.
    Activity is the check-in time, or the check-out time for orphans.
    """
    return sorted(
        sessions,
        key=lambda s: (s.date, as_instant(s.activity_at)),
        reverse=True,
    )
