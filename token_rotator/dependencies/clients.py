"""
Factory functions that build clients and services from explicit settings.

Nothing here is cached: each Lambda invocation builds its own clients so the
secret store client and retry budget can be swapped out in tests.
"""

from __future__ import annotations

from token_rotator.clients import SecretsManagerClient, TokenEndpointClient
from token_rotator.core.config import AppSettings, AWSSettings, RetrySettings
from token_rotator.services import TokenRotationService
from token_rotator.utils.http import RetryConfig


def get_retry_config(settings: RetrySettings) -> RetryConfig:
    """Translate retry settings into the HTTP retry configuration."""
    return RetryConfig(
        attempts=settings.max_attempts,
        backoff_seconds=settings.base_delay_seconds,
        timeout_seconds=settings.timeout_seconds,
    )


def get_secrets_manager_client(settings: AWSSettings) -> SecretsManagerClient:
    """Provide a Secrets Manager client for the configured region."""
    return SecretsManagerClient(settings)


def get_token_endpoint_client(settings: RetrySettings) -> TokenEndpointClient:
    """Provide a token endpoint client with the configured retry budget."""
    return TokenEndpointClient(get_retry_config(settings))


def build_rotation_service(settings: AppSettings) -> TokenRotationService:
    """Wire the rotation service for a single invocation."""
    return TokenRotationService(
        secret_store=get_secrets_manager_client(settings.aws),
        token_client=get_token_endpoint_client(settings.retry),
        source_secret_name=settings.rotation.source_secret_name,
        target_secret_name=settings.rotation.target_secret_name,
    )


__all__ = [
    "build_rotation_service",
    "get_retry_config",
    "get_secrets_manager_client",
    "get_token_endpoint_client",
]
