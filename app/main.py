# app/main.py
from fastapi import FastAPI

from app.api.routes import attendance, health
from app.core.config import get_settings
from app.core.logging import configure_logging


def create_app() -> FastAPI:
    """
    Application factory for the Attendance Reconciler service.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Service that reconciles raw check-in/check-out punches into work\n"
            "sessions, and rolls them up into per-user worked time and\n"
            "organization-wide attendance statistics."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(attendance.router)

    return app


app = create_app()
