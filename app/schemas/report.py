# app/schemas/report.py
from datetime import date as date_type

from pydantic import BaseModel, Field

from app.schemas.attendance import AttendanceSession, OrgStats, UserStats


class ProductivityEntry(BaseModel):
    """
    One row of the "User Productivity (Today)" ranking.
    """

    user_id: str = Field(..., example="u_42")
    name: str | None = Field(None, example="Asha Verma")
    email: str | None = Field(None, example="asha@example.com")
    total_minutes_today: int = Field(
        ...,
        description="Minutes worked today in completed sessions.",
        example=125,
    )
    display_duration: str = Field(
        ...,
        description="total_minutes_today formatted for display.",
        example="2 hr 5 min",
    )


class DailyAttendance(BaseModel):
    """
    A user's sessions on one local calendar day, with the day's total.
    """

    date: date_type = Field(..., example="2025-11-10")
    total_minutes: int = Field(
        ...,
        description="Sum of durations of completed sessions on this day.",
        example=480,
    )
    display_total: str = Field(..., example="8 hr")
    sessions: list[AttendanceSession] = Field(
        ...,
        description="Sessions of the day, latest activity first.",
    )


class UserHistory(BaseModel):
    """
    Attendance detail for a single user: stats and per-day history.
    """

    user_id: str = Field(..., example="u_42")
    stats: UserStats
    days: list[DailyAttendance] = Field(
        ...,
        description="One entry per day with activity, most recent day first.",
    )


class DashboardReport(BaseModel):
    """
    Admin dashboard payload built from a single reconciliation run.
    """

    today: date_type = Field(..., example="2025-11-10")
    org_stats: OrgStats
    today_sessions: list[AttendanceSession] = Field(
        ...,
        description="Sessions dated today, latest activity first.",
    )
    productivity: list[ProductivityEntry] = Field(
        ...,
        description="Users who worked today, most minutes first.",
    )
