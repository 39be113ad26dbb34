"""Configuration settings for the livefleet service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from livefleet.domain import DEFAULT_FILTER_TYPE, FilterType
from livefleet.models.live import FilterCriteria

logger = logging.getLogger("livefleet.config")

# Shared SSM client for secret reads. Default to a region so imports do not
# fail in environments without AWS configuration (e.g. CI test runners).
_ssm_client = boto3.client(
    "ssm",
    region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
)

INFINITE_FLIGHT_API_KEY_PARAM = "/livefleet/infinite_flight/api_key"


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_filter_type(env_var: str) -> FilterType | None:
    value = os.getenv(env_var, DEFAULT_FILTER_TYPE.value).strip().lower()
    if not value:
        return None
    try:
        return FilterType(value)
    except ValueError:
        logger.warning("Unknown live filter type %r; live flights will match nothing", value)
        return None


@lru_cache(maxsize=1)
def get_infinite_flight_api_key() -> str:
    """Fetch the Infinite Flight API key from AWS SSM Parameter Store.

    The value is cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the key results in a runtime error so callers can report that
    live flights are not configured.
    """

    try:
        response = _ssm_client.get_parameter(
            Name=INFINITE_FLIGHT_API_KEY_PARAM, WithDecryption=True
        )
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load Infinite Flight API key from SSM: %s", exc)
        raise RuntimeError("Unable to load Infinite Flight API key from SSM") from exc

    if not value:
        logger.error("Received empty Infinite Flight API key from SSM")
        raise RuntimeError("Infinite Flight API key not configured in SSM")

    return value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    livefleet_env: str = os.getenv("LIVEFLEET_ENV", "local")
    log_level: str = os.getenv("LIVEFLEET_LOG_LEVEL", "INFO")

    # Infinite Flight public API
    infinite_flight_base_url: str = os.getenv(
        "INFINITE_FLIGHT_BASE_URL", "https://api.infiniteflight.com/public/v2"
    )
    infinite_flight_timeout: float = float(os.getenv("INFINITE_FLIGHT_TIMEOUT", "10.0"))
    infinite_flight_api_key: str = os.getenv("INFINITE_FLIGHT_API_KEY", "")
    load_api_key_from_ssm: bool = _get_bool("LOAD_API_KEY_FROM_SSM", default=True)
    session_cache_ttl_seconds: float = float(os.getenv("SESSION_CACHE_TTL_SECONDS", "1800"))
    liveries_cache_ttl_seconds: float = float(
        os.getenv("LIVERIES_CACHE_TTL_SECONDS", "43200")
    )

    # Which flights belong to the airline
    airline_name: str = os.getenv("LIVEFLEET_AIRLINE_NAME", "Virtual Airline")
    live_filter_type: FilterType | None = _get_filter_type("LIVE_FILTER_TYPE")
    live_filter_suffix: str | None = os.getenv("LIVE_FILTER_SUFFIX") or None
    live_filter_virtual_org: str | None = os.getenv("LIVE_FILTER_VIRTUAL_ORG") or None

    # Caching
    flight_plan_cache_ttl_seconds: float = float(
        os.getenv("FLIGHT_PLAN_CACHE_TTL_SECONDS", "300")
    )
    flight_plan_timeout: float = float(os.getenv("FLIGHT_PLAN_TIMEOUT", "10.0"))
    snapshot_ttl_seconds: float = float(os.getenv("SNAPSHOT_TTL_SECONDS", "900"))


settings = Settings()


def get_filter_criteria() -> FilterCriteria:
    """Build the airline's flight filter from current settings."""

    return FilterCriteria(
        type=settings.live_filter_type,
        suffix=settings.live_filter_suffix,
        virtual_org=settings.live_filter_virtual_org,
    )


def resolve_infinite_flight_api_key() -> str:
    """Return the API key from the environment, falling back to SSM.

    Returns an empty string when no key is available.
    """

    if settings.infinite_flight_api_key:
        return settings.infinite_flight_api_key
    if not settings.load_api_key_from_ssm:
        return ""
    try:
        settings.infinite_flight_api_key = get_infinite_flight_api_key()
    except RuntimeError:
        logger.warning("Infinite Flight API key not available; live flights disabled")
    return settings.infinite_flight_api_key


__all__ = [
    "Settings",
    "get_filter_criteria",
    "get_infinite_flight_api_key",
    "resolve_infinite_flight_api_key",
    "settings",
]
