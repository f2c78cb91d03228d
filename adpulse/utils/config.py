# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


DEFAULT_PUBLIC_IP_SERVICES = [
    "https://api.ipify.org?format=text",
    "https://api64.ipify.org?format=text",
    "https://ipinfo.io/ip",
    "https://ifconfig.me/ip",
    "https://icanhazip.com",
]


class CollectorSettings(BaseSettings):
    """Remote collector settings used by the delivery client."""

    model_config = SettingsConfigDict(env_prefix="ADPULSE_COLLECTOR_")

    enabled: bool = Field(default=True, description="Send events to the remote collector")
    base_url: str = Field(default="https://mahimeta.com/api/", description="Collector base URL")
    endpoint: str = Field(default="statistics.php", description="Event submission path")
    connect_timeout_seconds: float = Field(default=30.0, description="HTTP connect timeout")
    read_timeout_seconds: float = Field(default=30.0, description="HTTP read timeout")
    max_workers: int = Field(
        default=8, description="Background delivery threads (one event per task)"
    )

    @property
    def url(self) -> str:
        """Full URL of the event submission endpoint."""
        return f"{self.base_url}{self.endpoint}"


class SessionSettings(BaseSettings):
    """Session tracking settings."""

    model_config = SettingsConfigDict(env_prefix="ADPULSE_SESSION_")

    timeout_minutes: float = Field(
        default=30, description="Session inactivity timeout in minutes"
    )
    max_events_in_memory: int = Field(
        default=1000, description="Maximum number of events kept in the in-memory log"
    )

    @property
    def timeout_seconds(self) -> float:
        """Inactivity timeout in seconds."""
        return self.timeout_minutes * 60


class NetworkSettings(BaseSettings):
    """Network address monitoring settings."""

    model_config = SettingsConfigDict(env_prefix="ADPULSE_NETWORK_")

    check_interval_seconds: float = Field(
        default=10.0, description="Interval between periodic address checks"
    )

    # External lookup is only a fallback when no interface carries a public address
    public_ip_lookup: bool = Field(
        default=False, description="Ask external services for the public IP address"
    )
    public_ip_services: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PUBLIC_IP_SERVICES),
        description="Services returning the caller's public IP as plain text",
    )
    lookup_timeout_seconds: float = Field(
        default=2.0, description="Timeout per public IP lookup request"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ADPULSE_",
        extra="ignore",
    )

    # Nested settings
    collector: CollectorSettings = Field(default_factory=CollectorSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    network: NetworkSettings = Field(default_factory=NetworkSettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
