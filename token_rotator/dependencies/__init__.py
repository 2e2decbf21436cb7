"""Expose dependency factories."""

from .clients import (
    build_rotation_service,
    get_retry_config,
    get_secrets_manager_client,
    get_token_endpoint_client,
)

__all__ = [
    "build_rotation_service",
    "get_retry_config",
    "get_secrets_manager_client",
    "get_token_endpoint_client",
]
