"""
Configuration Management

Uses Pydantic BaseSettings to load configuration from environment variables.
All settings can be overridden via .env file or environment variables.

Environment Variables:
    APP_ENV: Environment name (development/staging/production)
    DEBUG: Enable debug mode (default: False)
    BUSINESS_TIMEZONE: IANA timezone for bookings (default: America/Sao_Paulo)
    GOOGLE_CREDENTIALS_FILE: Service account key file (default: credenciais.json)
    WHATSAPP_ACCESS_TOKEN: WhatsApp Cloud API bearer token
    WHATSAPP_PHONE_NUMBER_ID: Sender phone number id
    WHATSAPP_VERIFY_TOKEN: Token echoed back during webhook verification
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Environment
    app_env: Literal["development", "staging", "production"] = "development"
    """Current application environment.

    Options:
    - development: Local development, verbose logging, error details exposed
    - staging: Pre-production testing environment
    - production: Live bot, minimal logging
    """

    debug: bool = False
    """Enable debug mode (DEBUG log level, request timing logs)."""

    app_name: str = "barberbot"
    """Application name."""

    host: str = "0.0.0.0"
    """Host to bind the application server."""

    port: int = 8000
    """Port to bind the application server."""

    # Booking Configuration
    business_timezone: str = "America/Sao_Paulo"
    """Timezone the shop works in.

    Dates typed by customers are interpreted in this zone and events are
    created on the calendar with it.
    """

    appointment_duration_minutes: int = 60
    """Length of every booked appointment."""

    typing_delay_seconds: float = 1.5
    """How long the "typing..." indicator is shown before each reply."""

    booking_timeout_seconds: Optional[float] = 30.0
    """Socket timeout of the Google Calendar HTTP requests.

    Applied to the HTTP connection itself, so a timed-out insert is aborted
    rather than left running. None or 0 waits indefinitely. A timeout counts as
    a failed booking and is never retried.
    """

    seen_message_limit: int = 5000
    """How many inbound WhatsApp message ids are remembered to drop redeliveries."""

    # Google Calendar
    google_credentials_file: str = "credenciais.json"
    """Path to the Google service account key (JSON)."""

    google_calendar_id: str = "primary"
    """Calendar that receives the bookings (the service account's own by default)."""

    # WhatsApp Cloud API
    whatsapp_access_token: str = ""
    """Bearer token for the Graph API.

    WARNING: Never commit this value. Leave empty to run without sending
    (health/ready will report the transport as not ready).
    """

    whatsapp_phone_number_id: str = ""
    """Phone number id messages are sent from."""

    whatsapp_api_url: str = "https://graph.facebook.com"
    """Graph API base URL."""

    whatsapp_api_version: str = "v21.0"
    """Graph API version segment."""

    whatsapp_verify_token: str = "dev-verify-token"
    """Token Meta sends back during the GET /webhook handshake."""

    whatsapp_app_secret: str = ""
    """App secret used to check X-Hub-Signature-256. Empty disables the check."""

    whatsapp_timeout: float = 15.0
    """HTTP timeout for Graph API calls, in seconds."""

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env file if it exists
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow WHATSAPP_ACCESS_TOKEN or whatsapp_access_token
        extra="ignore",  # Ignore extra environment variables
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once and reused
    across the application.

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from barberbot.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.business_timezone)
        America/Sao_Paulo
    """
    return Settings()


# Module-level settings instance for easy imports
settings = get_settings()
