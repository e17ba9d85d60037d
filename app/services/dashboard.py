# app/services/dashboard.py
from __future__ import annotations

from collections import defaultdict
from datetime import date as date_type
from typing import Dict, Iterable, List, Optional

from app.schemas.attendance import AttendanceSession, ReconciliationResult, UserStats
from app.schemas.report import (
    DailyAttendance,
    DashboardReport,
    ProductivityEntry,
    UserHistory,
)
from app.services.session_pairing import sort_for_display


def format_duration(minutes: Optional[int]) -> str:
    """
    Human-friendly duration: '45 min', '2 hr', '2 hr 5 min', or 'N/A'.
    """
    if minutes is None:
        return "N/A"

    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"


def sessions_on(
    sessions: Iterable[AttendanceSession], day: date_type
) -> List[AttendanceSession]:
    """Sessions dated `day`, keeping the input order."""
    return [s for s in sessions if s.date == day]


def productivity_ranking(user_stats: Dict[str, UserStats]) -> List[ProductivityEntry]:
    """
    Users who worked today, most minutes first (ties by name, then id).
    """
    active = [s for s in user_stats.values() if s.total_minutes_today > 0]
    active.sort(key=lambda s: (-s.total_minutes_today, s.name or "", s.user_id))

    return [
        ProductivityEntry(
            user_id=s.user_id,
            name=s.name,
            email=s.email,
            total_minutes_today=s.total_minutes_today,
            display_duration=format_duration(s.total_minutes_today),
        )
        for s in active
    ]


def user_history(result: ReconciliationResult, user_id: str) -> UserHistory:
    """
    Per-day attendance history of a single user.

    Raises LookupError if the user is not part of the reconciled roster.
    """
    stats = result.user_stats.get(user_id)
    if stats is None:
        raise LookupError(f"User with id={user_id} not found")

    by_day: Dict[date_type, List[AttendanceSession]] = defaultdict(list)
    for session in result.sessions:
        if session.user_id == user_id:
            by_day[session.date].append(session)

    days: List[DailyAttendance] = []
    for day in sorted(by_day, reverse=True):
        day_sessions = sort_for_display(by_day[day])
        total = sum(s.duration_minutes or 0 for s in day_sessions)
        days.append(
            DailyAttendance(
                date=day,
                total_minutes=total,
                display_total=format_duration(total),
                sessions=day_sessions,
            )
        )

    return UserHistory(user_id=user_id, stats=stats, days=days)


def build_dashboard(result: ReconciliationResult) -> DashboardReport:
    """
    Admin dashboard view: org stats, today's sessions and today's ranking.
    """
    return DashboardReport(
        today=result.today,
        org_stats=result.org_stats,
        today_sessions=sessions_on(result.sessions, result.today),
        productivity=productivity_ranking(result.user_stats),
    )
