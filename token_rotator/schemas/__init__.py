"""Pydantic schemas for secret payloads."""

from .rotation import SourceCredentialRecord, TargetTokenRecord

__all__ = ["SourceCredentialRecord", "TargetTokenRecord"]
