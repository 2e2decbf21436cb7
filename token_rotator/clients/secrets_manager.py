"""
AWS Secrets Manager wrapper for reading and overwriting JSON-valued secrets.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from token_rotator.core.config import AWSSettings
from token_rotator.core.errors import SecretRetrievalError, SecretUpdateError

logger = logging.getLogger(__name__)


class SecretsManagerClient:
    """Single-attempt get/put of JSON secrets."""

    def __init__(self, settings: AWSSettings, client: Optional[Any] = None) -> None:
        self._settings = settings
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=settings.region_name,
            endpoint_url=settings.secrets_manager_endpoint_url,
        )

    def get_secret_json(self, secret_name: str) -> Any:
        """Fetch a secret and parse its string value as JSON."""
        try:
            response = self._client.get_secret_value(SecretId=secret_name)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Error retrieving secret %s: %s", secret_name, exc)
            raise SecretRetrievalError(
                _error_message(exc), secret_name=secret_name
            ) from exc

        secret_string = response.get("SecretString")
        if secret_string is None:
            logger.error("Secret %s has no string value", secret_name)
            raise SecretRetrievalError(
                f"Secret {secret_name} does not contain a string value.",
                secret_name=secret_name,
            )

        try:
            return json.loads(secret_string)
        except json.JSONDecodeError as exc:
            logger.error("Secret %s is not valid JSON: %s", secret_name, exc.msg)
            raise SecretRetrievalError(
                f"Secret {secret_name} is not valid JSON: {exc.msg}",
                secret_name=secret_name,
            ) from exc

    def put_secret_json(self, secret_name: str, value: Any) -> None:
        """Overwrite the current value of a secret with ``value`` as JSON."""
        try:
            secret_string = json.dumps(value)
        except (TypeError, ValueError) as exc:
            logger.error("Value for secret %s is not JSON serializable: %s", secret_name, exc)
            raise SecretUpdateError(
                f"Value for secret {secret_name} is not JSON serializable: {exc}",
                secret_name=secret_name,
            ) from exc

        try:
            response = self._client.put_secret_value(
                SecretId=secret_name,
                SecretString=secret_string,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Error updating secret %s: %s", secret_name, exc)
            raise SecretUpdateError(_error_message(exc), secret_name=secret_name) from exc

        logger.info(
            "Secret %s updated successfully",
            secret_name,
            extra={"version_id": response.get("VersionId")},
        )


def _error_message(exc: Exception) -> str:
    """Prefer the service-provided message over botocore's wrapper text."""
    if isinstance(exc, ClientError):
        message = exc.response.get("Error", {}).get("Message")
        if message:
            return message
    return str(exc)


__all__ = ["SecretsManagerClient"]
