"""
Configuration constants and startup settings for the dashboard service.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the process environment cannot produce valid settings."""


class ExternalAPIConfig:
    """External API configuration"""

    OPENWEATHER_BASE_URL = "https://api.openweathermap.org"
    OPENWEATHER_PRO_BASE_URL = "https://pro.openweathermap.org"
    OPENWEATHER_ICON_URL = "http://openweathermap.org/img/wn/{icon}@2x.png"
    NYT_BASE_URL = "https://api.nytimes.com"

    REQUEST_TIMEOUT = 10

    UNITS = "imperial"
    GEOCODING_LIMIT = 1
    HOURLY_POINTS = 24
    DAILY_POINTS = 7
    MAX_HEADLINES = 5


class DisplayConfig:
    """Presentation defaults for the dashboard view"""

    HOURLY_LIMIT = 8
    UNIT_LABELS = {"imperial": "°F", "metric": "°C", "standard": "K"}


class Settings(BaseModel):
    """Immutable runtime settings, built once before any component starts."""

    model_config = ConfigDict(frozen=True)

    openweather_api_key: str = Field(..., min_length=1)
    nyt_api_key: str = Field(..., min_length=1)
    environment: str = "development"
    log_level: str = "INFO"
    request_timeout: float = Field(ExternalAPIConfig.REQUEST_TIMEOUT, gt=0)
    discard_stale_forecasts: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance

        Raises:
            ConfigError: If a credential is missing or a value is malformed
        """
        env = os.environ if environ is None else environ

        required = {
            "OPENWEATHER_API_KEY": env.get("OPENWEATHER_API_KEY", "").strip(),
            "NYT_API_KEY": env.get("NYT_API_KEY", "").strip(),
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        raw_timeout = env.get("REQUEST_TIMEOUT", str(ExternalAPIConfig.REQUEST_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"REQUEST_TIMEOUT must be a number, got {raw_timeout!r}") from e
        if timeout <= 0:
            raise ConfigError("REQUEST_TIMEOUT must be positive")

        log_level = env.get("LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )

        return cls(
            openweather_api_key=required["OPENWEATHER_API_KEY"],
            nyt_api_key=required["NYT_API_KEY"],
            environment=env.get("ENVIRONMENT", "development"),
            log_level=log_level,
            request_timeout=timeout,
            discard_stale_forecasts=env.get("DISCARD_STALE_FORECASTS", "false")
            .strip()
            .lower()
            in ("1", "true", "yes"),
        )
