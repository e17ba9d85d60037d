# tests/test_attendance_stats.py
from datetime import date, datetime, timezone

import pytest

from app.schemas.attendance import AttendanceSession, PunchEvent, PunchKind, RosterUser
from app.services.attendance_stats import (
    compute_org_stats,
    compute_user_stats,
    minutes_to_hours,
    round_half_up,
)

TODAY = date(2025, 11, 10)
YESTERDAY = date(2025, 11, 9)


def _session(user_id: str, day: date, minutes: int | None, open_: bool = False) -> AttendanceSession:
    ts = datetime(day.year, day.month, day.day, 9, tzinfo=timezone.utc)
    check_in = PunchEvent(id=f"{user_id}-{day}-in", user_id=user_id, kind=PunchKind.CHECK_IN, timestamp=ts)
    check_out = None
    if not open_:
        check_out = PunchEvent(
            id=f"{user_id}-{day}-out", user_id=user_id, kind=PunchKind.CHECK_OUT, timestamp=ts
        )
    return AttendanceSession(
        user_id=user_id,
        user_name=user_id,
        user_email=f"{user_id}@example.com",
        date=day,
        check_in=check_in,
        check_out=check_out,
        duration_minutes=minutes,
    )


def test_minutes_to_hours():
    assert minutes_to_hours(0) == 0.0
    assert minutes_to_hours(90) == 1.5
    assert minutes_to_hours(125) == 2 + 5 / 60


def test_user_stats_split_today_and_all_time():
    roster = [RosterUser(id="u1", name="Asha"), RosterUser(id="u2", name="Ben")]
    sessions = [
        _session("u1", TODAY, 120),
        _session("u1", TODAY, None, open_=True),
        _session("u1", YESTERDAY, 480),
    ]

    stats = compute_user_stats(sessions, roster, TODAY)

    assert stats["u1"].total_minutes_today == 120
    assert stats["u1"].total_minutes_all_time == 600
    assert stats["u1"].total_hours_today == 2.0
    assert stats["u1"].total_hours_all_time == 10.0
    assert stats["u1"].name == "Asha"


def test_idle_roster_members_get_zeroed_stats():
    roster = [RosterUser(id="u1"), RosterUser(id="u2", name="Ben")]

    stats = compute_user_stats([], roster, TODAY)

    assert set(stats) == {"u1", "u2"}
    assert stats["u2"].total_minutes_today == 0
    assert stats["u2"].total_minutes_all_time == 0
    assert stats["u2"].total_hours_all_time == 0.0


def test_avg_hours_today_counts_only_active_users():
    roster = [
        RosterUser(id="u1", is_checked_in=True),
        RosterUser(id="u2"),
        RosterUser(id="u3"),
    ]
    sessions = [_session("u1", TODAY, 120), _session("u2", YESTERDAY, 300)]
    user_stats = compute_user_stats(sessions, roster, TODAY)

    org = compute_org_stats(sessions, roster, user_stats, TODAY)

    assert org.total_users == 3
    assert org.checked_in_users == 1
    assert org.today_attendance == 1
    assert org.avg_hours_today == 2.0


def test_avg_hours_today_is_rounded_to_one_decimal():
    roster = [RosterUser(id="u1"), RosterUser(id="u2")]
    sessions = [_session("u1", TODAY, 100), _session("u2", TODAY, 45)]
    user_stats = compute_user_stats(sessions, roster, TODAY)

    org = compute_org_stats(sessions, roster, user_stats, TODAY)

    # (100/60 + 45/60) / 2 = 1.2083...
    assert org.avg_hours_today == 1.2


def test_today_attendance_counts_open_sessions_but_avg_ignores_them():
    roster = [RosterUser(id="u1"), RosterUser(id="u2")]
    sessions = [_session("u1", TODAY, None, open_=True), _session("u1", TODAY, None, open_=True)]
    user_stats = compute_user_stats(sessions, roster, TODAY)

    org = compute_org_stats(sessions, roster, user_stats, TODAY)

    assert org.today_attendance == 1
    assert org.avg_hours_today == 0.0


def test_empty_everything():
    org = compute_org_stats([], [], {}, TODAY)

    assert org.total_users == 0
    assert org.checked_in_users == 0
    assert org.today_attendance == 0
    assert org.avg_hours_today == 0.0


def test_avg_hours_today_rounds_ties_up():
    roster = [RosterUser(id="u1"), RosterUser(id="u2")]
    sessions = [_session("u1", TODAY, 120), _session("u2", TODAY, 150)]
    user_stats = compute_user_stats(sessions, roster, TODAY)

    org = compute_org_stats(sessions, roster, user_stats, TODAY)

    # (2.0 + 2.5) / 2 = 2.25
    assert org.avg_hours_today == 2.3


@pytest.mark.parametrize("value, expected", [(2.25, 2.3), (2.35, 2.4), (2.24, 2.2), (0.05, 0.1)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
