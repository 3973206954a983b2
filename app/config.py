"""Configuration settings for ThermalAI backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("thermalai.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=None)
def _read_ssm_parameter(name: str) -> str:
    """Fetch a decrypted secret from AWS SSM Parameter Store.

    Values are cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the secret results in a runtime error.
    """

    client = boto3.client(
        "ssm",
        region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
    )
    try:
        response = client.get_parameter(Name=name, WithDecryption=True)
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load %s from SSM: %s", name, exc)
        raise RuntimeError(f"Unable to load {name} from SSM") from exc

    if not value:
        logger.error("Received empty value for %s from SSM", name)
        raise RuntimeError(f"{name} not configured in SSM")

    return value


def _load_secret(env_var: str, ssm_name: str) -> str:
    """Return a secret from the environment, falling back to SSM when enabled."""

    value = os.getenv(env_var)
    if value:
        return value
    if not _get_bool("THERMALAI_USE_SSM"):
        return ""
    try:
        return _read_ssm_parameter(ssm_name)
    except RuntimeError:
        logger.warning("%s not available from SSM", ssm_name)
        return ""


def get_openai_api_key() -> str:
    return _load_secret("OPENAI_API_KEY", "/thermalai/openai/api_key")


def get_windy_api_key() -> str:
    return _load_secret("WINDY_API_KEY", "/thermalai/windy/api_key")


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    thermalai_env: str = os.getenv("THERMALAI_ENV", "local")
    log_level: str = os.getenv("THERMALAI_LOG_LEVEL", "INFO")
    retention_days: int = int(os.getenv("THERMALAI_RETENTION_DAYS", "14"))

    # All "today"/"tomorrow" bucketing happens in this timezone
    reference_timezone: str = os.getenv("THERMALAI_TIMEZONE", "America/Los_Angeles")

    # OpenAI / LLM settings
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_embedding_model: str = os.getenv(
        "OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"
    )
    openai_timeout: float = float(os.getenv("OPENAI_TIMEOUT", "30.0"))
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "2048"))
    openai_api_key: str = ""

    # Retrieval
    chat_top_k: int = int(os.getenv("CHAT_TOP_K", "3"))
    chunk_size: int = int(os.getenv("THERMALAI_CHUNK_SIZE", "1000"))
    chunk_overlap: int = int(os.getenv("THERMALAI_CHUNK_OVERLAP", "200"))

    # Open-Meteo forecasts
    weather_base_url: str = os.getenv(
        "WEATHER_BASE_URL", "https://api.open-meteo.com/v1/forecast"
    )
    weather_timeout: float = float(os.getenv("WEATHER_TIMEOUT", "10.0"))
    weather_model: str = os.getenv("WEATHER_MODEL", "hrrr")

    # Windy point forecasts
    windy_base_url: str = os.getenv(
        "WINDY_BASE_URL", "https://api.windy.com/api/point-forecast/v2"
    )
    windy_timeout: float = float(os.getenv("WINDY_TIMEOUT", "15.0"))
    windy_api_key: str = ""


settings = Settings()

# Secrets are resolved once at import
settings.openai_api_key = get_openai_api_key()
if not settings.openai_api_key:
    logger.warning("OpenAI API key not available at import time")

settings.windy_api_key = get_windy_api_key()

__all__ = ["settings", "Settings", "get_openai_api_key", "get_windy_api_key"]
