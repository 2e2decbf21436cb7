"""Exception hierarchy raised by the secret store and token endpoint clients."""

from __future__ import annotations


class TokenRotationError(Exception):
    """Base class for failures that abort a token rotation."""


class SecretStoreError(TokenRotationError):
    """Raised when a Secrets Manager operation fails."""

    def __init__(self, message: str, *, secret_name: str) -> None:
        super().__init__(message)
        self.secret_name = secret_name


class SecretRetrievalError(SecretStoreError):
    """Raised when a secret cannot be read or does not hold usable JSON."""


class SecretUpdateError(SecretStoreError):
    """Raised when a secret value cannot be overwritten."""


class TokenFetchError(TokenRotationError):
    """Raised when the token endpoint fails in a way that is not retried."""


class MaxRetriesExceededError(TokenRotationError):
    """Raised when every attempt against the token endpoint was transient."""

    def __init__(self, max_attempts: int, last_reason: str = "") -> None:
        super().__init__(f"Max retries ({max_attempts}) exceeded")
        self.max_attempts = max_attempts
        self.last_reason = last_reason


__all__ = [
    "MaxRetriesExceededError",
    "SecretRetrievalError",
    "SecretStoreError",
    "SecretUpdateError",
    "TokenFetchError",
    "TokenRotationError",
]
