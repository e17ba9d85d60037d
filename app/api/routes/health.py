# app/api/routes/health.py
from datetime import date, datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError
from app.services.timestamps import resolve_timezone, today_in


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Response schema for the health check endpoint.
    """

    status: str = Field(
        ...,
        description="'ok', or 'degraded' when LOCAL_TIMEZONE cannot be resolved.",
        example="ok",
    )
    app_name: str = Field(
        ...,
        description="Human-friendly name of the running application.",
        example="Attendance Reconciler",
    )
    environment: str = Field(
        ...,
        description="Current deployment environment (local/dev/stage/prod).",
        example="local",
    )
    local_timezone: str = Field(
        ...,
        description="Timezone used to bucket punches into calendar days.",
        example="Asia/Kolkata",
    )
    local_date: date | None = Field(
        None,
        description="Server's current calendar day in the local timezone.",
        example="2025-11-10",
    )
    timestamp_utc: datetime = Field(
        ...,
        description="Server-side timestamp (UTC) at which this health check was generated.",
        example="2025-01-01T10:30:00Z",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check for the Attendance Reconciler service",
    description=(
        "Lightweight endpoint to verify that the service is up and that its "
        "local-day configuration is usable.\n\n"
        "Typical use-cases:\n"
        "- Container / VM health probes\n"
        "- Checking which calendar day the server currently treats as 'today'\n"
    ),
    responses={
        200: {
            "description": "Service is responding.",
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "app_name": "Attendance Reconciler",
                        "environment": "local",
                        "local_timezone": "UTC",
                        "local_date": "2025-01-01",
                        "timestamp_utc": "2025-01-01T10:30:00Z",
                    }
                }
            },
        }
    },
)
async def health_check() -> HealthResponse:
    """
    Returns the current health status of the service.

    A misconfigured LOCAL_TIMEZONE is reported as 'degraded' rather than
    failing the probe.
    """
    settings = get_settings()

    status = "ok"
    local_date: date | None = None
    try:
        local_date = today_in(resolve_timezone(settings.LOCAL_TIMEZONE))
    except ConfigurationError:
        status = "degraded"

    return HealthResponse(
        status=status,
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        local_timezone=settings.LOCAL_TIMEZONE,
        local_date=local_date,
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
