# app/schemas/attendance.py
from datetime import date as date_type, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class PunchKind(str, Enum):
    """
    Direction of a single punch event.
    """

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class PunchEvent(BaseModel):
    """
    A single raw check-in or check-out record as read from storage.

    The timestamp is accepted in its raw form (datetime, ISO-8601 string or
    epoch milliseconds) and normalized by the reconciliation engine, which
    reports unparseable values instead of silently dropping the event.
    Inside reconciled sessions the timestamp is always a timezone-aware
    datetime in the configured local timezone.
    """

    id: str = Field(
        ...,
        description="Opaque, unique identifier of the punch record.",
        example="att_01HF3Z8K2Q",
    )
    user_id: str = Field(
        ...,
        description="Identifier of the user who punched.",
        example="u_42",
    )
    kind: PunchKind = Field(
        ...,
        description="Whether this punch is a check-in or a check-out.",
        example="check-in",
    )
    timestamp: datetime | int | float | str | None = Field(
        ...,
        description=(
            "Instant of the punch. ISO-8601 strings (with or without offset) and "
            "epoch milliseconds are accepted; naive values are read as local time."
        ),
        example="2025-11-10T09:00:00+05:30",
    )

    class Config:
        frozen = True


class RosterUser(BaseModel):
    """
    Read-only view of a user as known to the attendance roster.
    """

    id: str = Field(..., description="Identifier of the user.", example="u_42")
    name: str | None = Field(
        None,
        description="Display name of the user.",
        example="Asha Verma",
    )
    email: str | None = Field(
        None,
        description="Contact email of the user.",
        example="asha@example.com",
    )
    is_admin: bool = Field(
        False,
        description="Whether the user has administrative access.",
        example=False,
    )
    is_checked_in: bool = Field(
        False,
        description="Live 'currently checked in' flag maintained by the punch flow.",
        example=True,
    )

    class Config:
        frozen = True


class AttendanceSession(BaseModel):
    """
    A reconciled work session: one check-in and/or one check-out of a user
    on a given local calendar day.

    - Open session: check_in set, check_out missing.
    - Orphan check-out: check_out set, check_in missing.
    - duration_minutes is present only when both endpoints are present.
    """

    user_id: str = Field(..., description="Owner of the session.", example="u_42")
    user_name: str = Field(
        ...,
        description="Denormalized display name of the owner ('Unknown' if not set).",
        example="Asha Verma",
    )
    user_email: str = Field(
        ...,
        description="Denormalized email of the owner ('Unknown' if not set).",
        example="asha@example.com",
    )
    date: date_type = Field(
        ...,
        description="Local calendar day the session belongs to.",
        example="2025-11-10",
    )
    check_in: PunchEvent | None = Field(
        None,
        description="Check-in punch opening the session, if any.",
    )
    check_out: PunchEvent | None = Field(
        None,
        description="Check-out punch closing the session, if any.",
    )
    duration_minutes: int | None = Field(
        None,
        description="Whole minutes between check-in and check-out (rounded half up).",
        example=480,
    )

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_has_endpoint(self) -> "AttendanceSession":
        if self.check_in is None and self.check_out is None:
            raise ValueError("A session needs a check-in, a check-out, or both.")
        return self

    @property
    def is_open(self) -> bool:
        return self.check_in is not None and self.check_out is None

    @property
    def is_orphan(self) -> bool:
        return self.check_in is None and self.check_out is not None

    @property
    def activity_at(self) -> datetime:
        """Time of whichever endpoint exists, preferring the check-in."""
        punch = self.check_in if self.check_in is not None else self.check_out
        return punch.timestamp  # type: ignore[union-attr,return-value]


class UserStats(BaseModel):
    """
    Per-user worked time derived from reconciled sessions.

    Minute totals are exact; hour values are views of those totals and must
    never be summed back into minutes.
    """

    user_id: str = Field(..., description="Identifier of the user.", example="u_42")
    name: str | None = Field(None, description="Display name of the user.")
    email: str | None = Field(None, description="Contact email of the user.")
    total_minutes_today: int = Field(
        0,
        description="Minutes worked in completed sessions dated today.",
        example=120,
    )
    total_minutes_all_time: int = Field(
        0,
        description="Minutes worked in all completed sessions.",
        example=4320,
    )
    total_hours_today: float = Field(
        0.0,
        description="total_minutes_today expressed as fractional hours.",
        example=2.0,
    )
    total_hours_all_time: float = Field(
        0.0,
        description="total_minutes_all_time expressed as fractional hours.",
        example=72.0,
    )

    class Config:
        frozen = True


class OrgStats(BaseModel):
    """
    Organization-wide attendance figures for a single reconciliation run.
    """

    total_users: int = Field(..., description="Number of users in the roster.", example=3)
    checked_in_users: int = Field(
        ...,
        description="Users whose live 'checked in' flag is set.",
        example=1,
    )
    today_attendance: int = Field(
        ...,
        description="Distinct users with at least one session dated today.",
        example=1,
    )
    avg_hours_today: float = Field(
        ...,
        description=(
            "Mean hours worked today over users who worked today "
            "(users with zero minutes are excluded), rounded to one decimal."
        ),
        example=2.0,
    )

    class Config:
        frozen = True


class AnomalyKind(str, Enum):
    """
    Non-fatal data problems detected during reconciliation.
    """

    UNKNOWN_USER = "UNKNOWN_USER"


class ReconciliationAnomaly(BaseModel):
    """
    A punch event the engine could not attribute, reported back to the caller.
    """

    kind: AnomalyKind = Field(..., example="UNKNOWN_USER")
    event_id: str = Field(..., description="Identifier of the affected punch.")
    user_id: str = Field(..., description="User id referenced by the punch.")
    message: str = Field(..., description="Human-readable explanation.")

    class Config:
        frozen = True


class ReconciliationResult(BaseModel):
    """
    Complete derived view produced by one reconciliation run.
    """

    today: date_type = Field(
        ...,
        description="Local calendar day treated as 'today' for this run.",
        example="2025-11-10",
    )
    sessions: list[AttendanceSession] = Field(
        ...,
        description="All sessions, most recent date first, latest activity first within a date.",
    )
    user_stats: dict[str, UserStats] = Field(
        ...,
        description="Stats for every roster member keyed by user id (zeroed when idle).",
    )
    org_stats: OrgStats = Field(..., description="Organization-wide summary.")
    anomalies: list[ReconciliationAnomaly] = Field(
        default_factory=list,
        description="Punches skipped because their user is not in the roster.",
    )

    class Config:
        frozen = True


class ReconcileRequest(BaseModel):
    """
    Snapshot payload posted to the attendance endpoints.
    """

    events: list[PunchEvent] = Field(
        default_factory=list,
        description="Raw punch events to reconcile, in any order.",
    )
    users: list[RosterUser] = Field(
        default_factory=list,
        description="Current user roster.",
    )
    today: date_type | None = Field(
        None,
        description=(
            "Local calendar day to treat as 'today'. If omitted, the server's "
            "current date in LOCAL_TIMEZONE is used."
        ),
        example="2025-11-10",
    )
