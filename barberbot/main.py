"""
Barbearia TwoWell Bot API

FastAPI application entry point: WhatsApp webhook, health probes and the
transport lifecycle.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from barberbot import __version__
from barberbot.api.dependencies import get_calendar, get_conversation_router, get_transport
from barberbot.api.routes import health, webhook
from barberbot.config import settings


def setup_logging() -> None:
    """Configure logging based on environment."""
    log_level = logging.DEBUG if settings.debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Connects the WhatsApp transport on startup and closes it on shutdown.
    """
    # === STARTUP ===
    setup_logging()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")

    # Set health check start time
    health.set_start_time()

    transport = get_transport()
    await transport.connect()

    if get_calendar().is_configured():
        logger.info("Google Calendar credentials found")
    else:
        logger.warning(
            f"Google Calendar credentials not found at {settings.google_credentials_file}. "
            "Bookings will fail until they are provided."
        )

    # Build the router (and its session store) before the first webhook
    get_conversation_router()

    logger.info("Tudo certo! WhatsApp conectado e pronto para agendar.")

    yield

    # === SHUTDOWN ===
    logger.info("Shutting down application...")

    await transport.close()
    logger.info("WhatsApp transport closed")

    logger.info("Shutdown complete")


app = FastAPI(
    title="Barbearia TwoWell Bot",
    description="""
    WhatsApp bot for Barbearia TwoWell.

    ## Features
    - 💈 Numbered menu: booking, prices, services, contact, FAQ
    - 🗓️ Books appointments on Google Calendar from a DD/MM/AAAA HH:MM reply
    - 📱 WhatsApp Cloud API webhook
    """,
    version=__version__,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    # Don't expose internal errors in production
    detail = str(exc) if settings.is_development else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": detail,
        },
    )


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    """Log request duration in debug mode."""
    start_time = time.time()

    try:
        response = await call_next(request)
        return response
    finally:
        if settings.debug:
            duration = time.time() - start_time
            logger.debug(
                f"{request.method} {request.url.path} "
                f"completed in {duration:.3f}s"
            )


# Health check routes
app.include_router(health.router)

# WhatsApp webhook
app.include_router(webhook.router)


@app.get("/", tags=["Root"])
async def root() -> dict:
    """
    Root endpoint.

    Returns basic API information.
    """
    return {
        "name": settings.app_name,
        "version": __version__,
        "status": "running",
        "environment": settings.app_env,
        "docs": "/docs" if settings.is_development else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "barberbot.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
