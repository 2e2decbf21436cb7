"""
Configuration models and helpers for the token rotation function.

Settings are read from the process environment (optionally seeded from a
``.env`` file) so the Lambda runtime and the local operator scripts share one
configuration surface.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class AWSSettings(BaseSettings):
    """Settings for the AWS Secrets Manager client."""

    model_config = SettingsConfigDict(extra="ignore")

    region_name: str = Field("us-east-1", validation_alias="AWS_REGION")
    secrets_manager_endpoint_url: Optional[str] = Field(
        None,
        validation_alias="SECRETS_MANAGER_ENDPOINT_URL",
        description="Optional endpoint override, e.g. a LocalStack URL.",
    )


class RotationSettings(BaseSettings):
    """Names of the secrets read from and written to during a rotation."""

    model_config = SettingsConfigDict(extra="ignore")

    source_secret_name: str = Field(
        ...,
        min_length=1,
        validation_alias="SOURCE_SECRET_NAME",
        description="Secret holding TOKEN_URL, CLIENT_ID and CLIENT_SECRET.",
    )
    target_secret_name: str = Field(
        ...,
        min_length=1,
        validation_alias="TARGET_SECRET_NAME",
        description="Secret overwritten with API_TOKEN and UPDATED_AT.",
    )


class RetrySettings(BaseSettings):
    """Retry budget for the token endpoint call."""

    model_config = SettingsConfigDict(extra="ignore")

    max_attempts: int = Field(3, ge=1, validation_alias="TOKEN_FETCH_MAX_ATTEMPTS")
    base_delay_seconds: float = Field(
        1.0, ge=0, validation_alias="TOKEN_FETCH_BASE_DELAY_SECONDS"
    )
    timeout_seconds: float = Field(5.0, gt=0, validation_alias="TOKEN_FETCH_TIMEOUT_SECONDS")


class AppSettings(BaseSettings):
    """Root settings object for the rotation function."""

    model_config = SettingsConfigDict(extra="ignore")

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    aws: AWSSettings
    rotation: RotationSettings
    retry: RetrySettings


def load_settings() -> AppSettings:
    """Build settings from the current environment.

    Each section is constructed on its own so a missing variable surfaces as a
    ``ValidationError`` naming the environment variable itself.
    """
    return AppSettings(
        aws=AWSSettings(),
        rotation=RotationSettings(),
        retry=RetrySettings(),
    )


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return load_settings()


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a settings ``ValidationError`` into a one-line summary."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "settings"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


__all__ = [
    "AppSettings",
    "AWSSettings",
    "RetrySettings",
    "RotationSettings",
    "describe_validation_error",
    "get_settings",
    "load_settings",
]
