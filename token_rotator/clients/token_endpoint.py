"""
Client-credentials token exchange against an OAuth-style token endpoint.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

import httpx

from token_rotator.core.errors import MaxRetriesExceededError, TokenFetchError
from token_rotator.utils.http import (
    AttemptOutcome,
    Fatal,
    RetryConfig,
    SleepFunc,
    Success,
    Transient,
    is_transient_status,
    retry_with_backoff,
)

logger = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 200


class TokenEndpointClient:
    """Exchange a client id/secret pair for a fresh access token."""

    ACCESS_TOKEN_FIELD = "access_token"

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._retry = retry_config or RetryConfig()
        self._sleep = sleep
        self._transport = transport

    async def fetch_token(self, token_url: str, *, client_id: str, client_secret: str) -> str:
        """
        POST to ``token_url`` with basic auth and return the issued access token.

        5xx responses are retried with linear backoff; every other failure
        raises ``TokenFetchError`` straight away.
        """
        auth = (client_id, client_secret)
        async with httpx.AsyncClient(
            timeout=self._retry.timeout_seconds, transport=self._transport
        ) as client:
            outcome = await retry_with_backoff(
                lambda: self._attempt(client, token_url, auth),
                retry_config=self._retry,
                sleep=self._sleep,
            )

        if isinstance(outcome, Success):
            return outcome.value
        if isinstance(outcome, Fatal):
            logger.error("Token fetch from %s failed: %s", token_url, outcome.reason)
            raise TokenFetchError(f"Token fetch failed: {outcome.reason}")

        logger.error(
            "Token endpoint %s still failing after %d attempts: %s",
            token_url,
            outcome.attempts,
            outcome.last_reason,
        )
        raise MaxRetriesExceededError(self._retry.attempts, outcome.last_reason)

    async def _attempt(
        self, client: httpx.AsyncClient, token_url: str, auth: Tuple[str, str]
    ) -> AttemptOutcome[str]:
        try:
            response = await client.post(
                token_url, auth=auth, headers={"Accept": "application/json"}
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return Fatal(str(exc) or type(exc).__name__)

        if is_transient_status(response.status_code):
            return Transient(_describe_status(response))
        if not response.is_success:
            body = response.text.strip()[:_ERROR_BODY_LIMIT]
            detail = _describe_status(response)
            return Fatal(f"{detail}: {body}" if body else detail)

        try:
            payload = response.json()
        except ValueError:
            return Fatal("Token endpoint returned a non-JSON response.")

        token = payload.get(self.ACCESS_TOKEN_FIELD) if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            return Fatal(f"Token endpoint response did not include {self.ACCESS_TOKEN_FIELD}.")
        return Success(token)


def _describe_status(response: httpx.Response) -> str:
    return f"HTTP {response.status_code} {response.reason_phrase}".rstrip()


__all__ = ["TokenEndpointClient"]
