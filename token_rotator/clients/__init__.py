"""Expose constructed client wrappers."""

from .secrets_manager import SecretsManagerClient
from .token_endpoint import TokenEndpointClient

__all__ = [
    "SecretsManagerClient",
    "TokenEndpointClient",
]
