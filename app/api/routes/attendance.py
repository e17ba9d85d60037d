# app/api/routes/attendance.py
from datetime import date as date_type, tzinfo
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError, InvalidTimestampError
from app.schemas.attendance import ReconcileRequest, ReconciliationResult
from app.schemas.report import DashboardReport, UserHistory
from app.services.dashboard import build_dashboard, user_history
from app.services.reconciliation import ReconciliationEngine
from app.services.timestamps import resolve_timezone, today_in

router = APIRouter(prefix="/attendance", tags=["Attendance"])


def get_local_timezone() -> tzinfo:
    """
    Dependency resolving LOCAL_TIMEZONE from settings.
    """
    settings = get_settings()
    try:
        return resolve_timezone(settings.LOCAL_TIMEZONE)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


def _run(payload: ReconcileRequest, tz: tzinfo) -> ReconciliationResult:
    today: date_type = payload.today or today_in(tz)
    engine = ReconciliationEngine(tz=tz)
    try:
        return engine.run(payload.events, payload.users, today)
    except InvalidTimestampError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "event_id": exc.event_id},
        ) from exc


_SNAPSHOT_ERRORS = {
    422: {
        "description": (
            "Payload validation failed, or a punch has a missing/unparseable "
            "timestamp (the whole snapshot is rejected)."
        ),
    },
}


@router.post(
    "/reconcile",
    response_model=ReconciliationResult,
    status_code=HTTPStatus.OK,
    summary="Reconcile raw punches into sessions and statistics",
    description=(
        "Takes a snapshot of raw check-in/check-out punches and the user roster and "
        "returns the reconciled view:\n\n"
        "- Sessions per user and local day (open sessions and orphan check-outs included)\n"
        "- Per-user minutes/hours for today and all time\n"
        "- Organization stats: users, checked-in users, today's attendance, "
        "average hours today over active users\n\n"
        "Punches of users missing from the roster are skipped and reported in "
        "`anomalies`. If `today` is omitted, the server's current date in "
        "`LOCAL_TIMEZONE` is used."
    ),
    responses=_SNAPSHOT_ERRORS,
)
async def reconcile_attendance(
    payload: ReconcileRequest,
    tz: tzinfo = Depends(get_local_timezone),
) -> ReconciliationResult:
    return _run(payload, tz)


@router.post(
    "/dashboard",
    response_model=DashboardReport,
    status_code=HTTPStatus.OK,
    summary="Admin dashboard view for today",
    description=(
        "Reconciles the snapshot and returns the admin dashboard payload: "
        "organization stats, today's sessions (latest first) and the "
        "productivity ranking of users who worked today."
    ),
    responses=_SNAPSHOT_ERRORS,
)
async def attendance_dashboard(
    payload: ReconcileRequest,
    tz: tzinfo = Depends(get_local_timezone),
) -> DashboardReport:
    return build_dashboard(_run(payload, tz))


@router.post(
    "/users/{user_id}/history",
    response_model=UserHistory,
    status_code=HTTPStatus.OK,
    summary="Attendance history of a single user",
    description=(
        "Reconciles the snapshot and returns one user's stats together with their "
        "sessions grouped per day (most recent first) and each day's total."
    ),
    responses={
        **_SNAPSHOT_ERRORS,
        404: {
            "description": "User is not part of the posted roster.",
            "content": {
                "application/json": {
                    "example": {"detail": "User with id=u_404 not found"},
                }
            },
        },
    },
)
async def attendance_user_history(
    payload: ReconcileRequest,
    user_id: str = Path(..., description="Identifier of the user.", example="u_42"),
    tz: tzinfo = Depends(get_local_timezone),
) -> UserHistory:
    result = _run(payload, tz)
    try:
        return user_history(result, user_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc)) from exc
