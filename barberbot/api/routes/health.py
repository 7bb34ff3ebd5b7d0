"""
Health Check Endpoints

Provides health, readiness, and liveness probes for monitoring
and container orchestration.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from barberbot import __version__
from barberbot.api.dependencies import get_calendar, get_transport
from barberbot.config import settings
from barberbot.core.conversation import MessageTransport
from barberbot.core.scheduling import CalendarGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

# Track application start time for uptime calculation
_start_time: Optional[datetime] = None


def set_start_time() -> None:
    """Set application start time. Called once on startup."""
    global _start_time
    _start_time = datetime.now(timezone.utc)


def get_uptime_seconds() -> Optional[float]:
    """Get application uptime in seconds."""
    if _start_time is None:
        return None
    return (datetime.now(timezone.utc) - _start_time).total_seconds()


class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: datetime
    version: str
    environment: str


class ReadyResponse(BaseModel):
    """Readiness check response with dependency status."""
    status: str
    timestamp: datetime
    checks: dict[str, str]


class LiveResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: datetime
    uptime_seconds: Optional[float] = None


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the application is running. Does not check dependencies.",
)
async def health() -> HealthResponse:
    """
    Basic health check.

    Always returns 200 if the application is running.
    Use /health/ready for dependency checks.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.app_env,
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Checks WhatsApp and Google Calendar configuration. Returns 503 if either is missing.",
    responses={
        200: {"description": "Bot can receive, reply and book"},
        503: {"description": "WhatsApp or calendar credentials are missing"},
    },
)
async def ready(
    transport: MessageTransport = Depends(get_transport),
    calendar: CalendarGateway = Depends(get_calendar),
):
    """
    Readiness probe.

    Checks:
    - WhatsApp transport has credentials
    - Calendar gateway has a service account key

    Returns 503 if any check fails.
    """
    checks = {
        "whatsapp": "ok" if transport.is_ready else "not_configured",
        "calendar": "ok" if calendar.is_configured() else "not_configured",
    }
    all_ok = all(v == "ok" for v in checks.values())

    if not all_ok:
        logger.warning(f"Readiness check failed: {checks}")

    response = ReadyResponse(
        status="ready" if all_ok else "not_ready",
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )

    # Return 503 if not ready
    if not all_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(mode="json"),
        )

    return response


@router.get(
    "/live",
    response_model=LiveResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Returns 200 if the process is alive. Used for container restart decisions.",
)
async def live() -> LiveResponse:
    """Liveness probe. Always returns 200 if the process is running."""
    return LiveResponse(
        status="alive",
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=get_uptime_seconds(),
    )
