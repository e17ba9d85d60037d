# app/services/attendance_stats.py
from __future__ import annotations

from collections import defaultdict
from datetime import date as date_type
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence

from app.schemas.attendance import AttendanceSession, OrgStats, RosterUser, UserStats


def minutes_to_hours(minutes: int) -> float:
    """Whole hours plus the remaining minutes as a fraction of an hour."""
    return minutes // 60 + (minutes % 60) / 60.0


def round_half_up(value: float, places: str = "0.1") -> float:
    """Round to `places` with ties going up (2.25 -> 2.3, not 2.2)."""
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def compute_user_stats(
    sessions: Iterable[AttendanceSession],
    roster: Sequence[RosterUser],
    today: date_type,
) -> Dict[str, UserStats]:
    """
    Fold sessions into per-user worked time.

    Rules
    -----
    - Only sessions with both endpoints (i.e. a duration) count.
    - total_minutes_today covers sessions dated `today`,
      total_minutes_all_time covers all of them.
    - Every roster member gets an entry, zeroed when idle.
    - Minutes are summed as exact integers; hours are derived at the end.
    """
    minutes_today: Dict[str, int] = defaultdict(int)
    minutes_all_time: Dict[str, int] = defaultdict(int)

    for session in sessions:
        if session.duration_minutes is None:
            continue
        minutes_all_time[session.user_id] += session.duration_minutes
        if session.date == today:
            minutes_today[session.user_id] += session.duration_minutes

    stats: Dict[str, UserStats] = {}
    for user in roster:
        today_total = minutes_today.get(user.id, 0)
        all_time_total = minutes_all_time.get(user.id, 0)
        stats[user.id] = UserStats(
            user_id=user.id,
            name=user.name,
            email=user.email,
            total_minutes_today=today_total,
            total_minutes_all_time=all_time_total,
            total_hours_today=minutes_to_hours(today_total),
            total_hours_all_time=minutes_to_hours(all_time_total),
        )
    return stats


def compute_org_stats(
    sessions: Iterable[AttendanceSession],
    roster: Sequence[RosterUser],
    user_stats: Dict[str, UserStats],
    today: date_type,
) -> OrgStats:
    """
    Organization-wide figures for `today`.

    avg_hours_today is averaged over users who actually worked today; users
    with zero minutes today are left out of both the sum and the count.
    """
    present_today = {s.user_id for s in sessions if s.date == today}

    active: List[UserStats] = [
        stats for stats in user_stats.values() if stats.total_minutes_today > 0
    ]
    if active:
        total_hours = sum(stats.total_minutes_today / 60.0 for stats in active)
        avg_hours_today = round_half_up(total_hours / len(active))
    else:
        avg_hours_today = 0.0

    return OrgStats(
        total_users=len(roster),
        checked_in_users=sum(1 for user in roster if user.is_checked_in),
        today_attendance=len(present_today),
        avg_hours_today=avg_hours_today,
    )
