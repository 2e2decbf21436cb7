"""Service layer exports."""

from .token_rotation import RotationResult, TokenRotationService

__all__ = [
    "RotationResult",
    "TokenRotationService",
]
