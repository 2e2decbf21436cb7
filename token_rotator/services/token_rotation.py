"""
Rotate an API token: read credentials, fetch a fresh token, store it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from token_rotator.clients import SecretsManagerClient, TokenEndpointClient
from token_rotator.core.errors import SecretRetrievalError, TokenRotationError
from token_rotator.schemas import SourceCredentialRecord, TargetTokenRecord

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Token rotated successfully"


@dataclass(slots=True)
class RotationResult:
    """Outcome of a rotation in the shape returned to the invoker."""

    status_code: int
    message: str

    @classmethod
    def success(cls, message: str = SUCCESS_MESSAGE) -> "RotationResult":
        return cls(status_code=HTTPStatus.OK, message=message)

    @classmethod
    def failure(cls, message: str) -> "RotationResult":
        return cls(status_code=HTTPStatus.INTERNAL_SERVER_ERROR, message=message)

    @property
    def ok(self) -> bool:
        return self.status_code == HTTPStatus.OK

    def to_response(self) -> Dict[str, Any]:
        return {
            "statusCode": int(self.status_code),
            "body": json.dumps({"message": self.message}),
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenRotationService:
    """Runs the read, fetch and write steps and reports a single result."""

    def __init__(
        self,
        secret_store: SecretsManagerClient,
        token_client: TokenEndpointClient,
        *,
        source_secret_name: str,
        target_secret_name: str,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = secret_store
        self._tokens = token_client
        self._source_secret_name = source_secret_name
        self._target_secret_name = target_secret_name
        self._clock = clock or _utcnow

    async def rotate(self) -> RotationResult:
        """
        Rotate the token and map any failure to a 500 result.

        The target secret is written at most once, and only after a token was
        issued.
        """
        try:
            await self._rotate()
        except TokenRotationError as exc:
            logger.error(
                "Error in token rotation (%s -> %s): %s",
                self._source_secret_name,
                self._target_secret_name,
                exc,
            )
            return RotationResult.failure(str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure during token rotation")
            return RotationResult.failure(str(exc))

        return RotationResult.success()

    async def _rotate(self) -> None:
        credentials = self._load_source_credentials()

        logger.info("Requesting new access token from %s", credentials.token_url)
        token = await self._tokens.fetch_token(
            credentials.token_url,
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
        )

        record = TargetTokenRecord.issued(token, self._clock())
        self._store.put_secret_json(self._target_secret_name, record.to_secret_value())
        logger.info(
            "Stored rotated token",
            extra={"target_secret": self._target_secret_name, "updated_at": record.updated_at},
        )

    def _load_source_credentials(self) -> SourceCredentialRecord:
        name = self._source_secret_name
        value = self._store.get_secret_json(name)
        if not isinstance(value, dict):
            logger.error("Secret %s does not hold a JSON object", name)
            raise SecretRetrievalError(
                f"Secret {name} must contain a JSON object.", secret_name=name
            )

        try:
            return SourceCredentialRecord.model_validate(value)
        except ValidationError as exc:
            fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
            logger.error("Secret %s has missing or invalid fields: %s", name, fields)
            raise SecretRetrievalError(
                f"Secret {name} has missing or invalid fields: {', '.join(fields)}",
                secret_name=name,
            ) from exc


__all__ = ["RotationResult", "SUCCESS_MESSAGE", "TokenRotationService"]
