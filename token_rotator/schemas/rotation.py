"""Schemas for the secret records read and written during a rotation."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class SourceCredentialRecord(BaseModel):
    """Client credentials and token endpoint stored in the source secret."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    token_url: str = Field(..., alias="TOKEN_URL", min_length=1)
    client_id: str = Field(..., alias="CLIENT_ID", min_length=1)
    client_secret: str = Field(..., alias="CLIENT_SECRET", min_length=1, repr=False)


class TargetTokenRecord(BaseModel):
    """Value written to the target secret, replacing whatever it held."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_token: str = Field(..., alias="API_TOKEN", min_length=1, repr=False)
    updated_at: str = Field(..., alias="UPDATED_AT")

    @classmethod
    def issued(cls, token: str, issued_at: datetime) -> "TargetTokenRecord":
        """Build a record stamped with ``issued_at`` as ISO-8601 UTC."""
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        stamp = issued_at.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return cls(API_TOKEN=token, UPDATED_AT=stamp.replace("+00:00", "Z"))

    def to_secret_value(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


__all__ = ["SourceCredentialRecord", "TargetTokenRecord"]
