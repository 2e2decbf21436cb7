from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from token_rotator.clients import TokenEndpointClient
from token_rotator.core.errors import (
    MaxRetriesExceededError,
    SecretRetrievalError,
    SecretUpdateError,
    TokenFetchError,
)
from token_rotator.services.token_rotation import RotationResult, TokenRotationService
from token_rotator.utils.http import RetryConfig

SOURCE = "prod/api/source"
TARGET = "prod/api/token"
FIXED_NOW = datetime(2026, 10, 19, 8, 30, 0, 123000, tzinfo=timezone.utc)

SOURCE_RECORD = {
    "TOKEN_URL": "https://auth.example.com/oauth/token",
    "CLIENT_ID": "client-id",
    "CLIENT_SECRET": "client-secret",
}


class FakeSecretStore:
    def __init__(self, secrets: dict | None = None, *, read_error: Exception | None = None) -> None:
        self.secrets = dict(secrets or {})
        self.read_error = read_error
        self.write_error: Exception | None = None
        self.reads: list[str] = []
        self.writes: list[tuple[str, dict]] = []

    def get_secret_json(self, secret_name: str):
        self.reads.append(secret_name)
        if self.read_error is not None:
            raise self.read_error
        return self.secrets[secret_name]

    def put_secret_json(self, secret_name: str, value) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append((secret_name, value))
        self.secrets[secret_name] = value


class StubTokenClient:
    def __init__(self, token: str = "T123", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.calls: list[dict] = []

    async def fetch_token(self, token_url: str, *, client_id: str, client_secret: str) -> str:
        self.calls.append(
            {"token_url": token_url, "client_id": client_id, "client_secret": client_secret}
        )
        if self.error is not None:
            raise self.error
        return self.token


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _service(store, token_client) -> TokenRotationService:
    return TokenRotationService(
        secret_store=store,
        token_client=token_client,
        source_secret_name=SOURCE,
        target_secret_name=TARGET,
        clock=lambda: FIXED_NOW,
    )


@pytest.mark.asyncio
async def test_rotate_writes_token_record_and_reports_success() -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})
    token_client = StubTokenClient(token="T123")

    result = await _service(store, token_client).rotate()

    assert result.status_code == 200
    assert result.message == "Token rotated successfully"
    assert token_client.calls == [
        {
            "token_url": "https://auth.example.com/oauth/token",
            "client_id": "client-id",
            "client_secret": "client-secret",
        }
    ]
    assert store.writes == [
        (TARGET, {"API_TOKEN": "T123", "UPDATED_AT": "2026-10-19T08:30:00.123Z"})
    ]


@pytest.mark.asyncio
async def test_rotate_round_trip_through_http_endpoint() -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"access_token": "T123"})
    )
    token_client = TokenEndpointClient(RetryConfig(), sleep=RecordingSleep(), transport=transport)

    result = await _service(store, token_client).rotate()

    assert result.to_response() == {
        "statusCode": 200,
        "body": json.dumps({"message": "Token rotated successfully"}),
    }
    written = store.secrets[TARGET]
    assert written["API_TOKEN"] == "T123"
    assert datetime.fromisoformat(written["UPDATED_AT"].replace("Z", "+00:00")) == FIXED_NOW


@pytest.mark.asyncio
async def test_rotate_retries_through_transient_failures() -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})
    responses = [httpx.Response(503), httpx.Response(503), httpx.Response(200, json={"access_token": "ABC"})]
    sleep = RecordingSleep()
    token_client = TokenEndpointClient(
        RetryConfig(),
        sleep=sleep,
        transport=httpx.MockTransport(lambda request: responses.pop(0)),
    )

    result = await _service(store, token_client).rotate()

    assert result.ok
    assert store.secrets[TARGET]["API_TOKEN"] == "ABC"
    assert sum(sleep.delays) >= 3.0


@pytest.mark.asyncio
async def test_source_secret_not_found_short_circuits() -> None:
    store = FakeSecretStore(read_error=SecretRetrievalError("not found", secret_name=SOURCE))
    token_client = StubTokenClient()

    result = await _service(store, token_client).rotate()

    assert result.to_response() == {
        "statusCode": 500,
        "body": json.dumps({"message": "not found"}),
    }
    assert token_client.calls == []
    assert store.writes == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        TokenFetchError("Token fetch failed: HTTP 401 Unauthorized"),
        MaxRetriesExceededError(3, "HTTP 503 Service Unavailable"),
    ],
)
async def test_fetch_failures_never_reach_the_writer(error: Exception) -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})

    result = await _service(store, StubTokenClient(error=error)).rotate()

    assert result.status_code == 500
    assert result.message == str(error)
    assert store.writes == []


@pytest.mark.asyncio
async def test_unauthorized_endpoint_fails_without_delay() -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})
    sleep = RecordingSleep()
    token_client = TokenEndpointClient(
        RetryConfig(),
        sleep=sleep,
        transport=httpx.MockTransport(lambda request: httpx.Response(401, text="bad credentials")),
    )

    result = await _service(store, token_client).rotate()

    assert result.status_code == 500
    assert "401" in result.message
    assert "bad credentials" in result.message
    assert sleep.delays == []
    assert store.writes == []


@pytest.mark.asyncio
async def test_exhausted_retries_report_attempt_budget() -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})
    token_client = TokenEndpointClient(
        RetryConfig(),
        sleep=RecordingSleep(),
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )

    result = await _service(store, token_client).rotate()

    assert result.status_code == 500
    assert result.message == "Max retries (3) exceeded"
    assert store.writes == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("secret_value", "expected"),
    [
        ({"TOKEN_URL": "https://auth", "CLIENT_ID": "id"}, "CLIENT_SECRET"),
        ({"TOKEN_URL": "", "CLIENT_ID": "id", "CLIENT_SECRET": "s"}, "TOKEN_URL"),
        (["not", "an", "object"], "JSON object"),
    ],
)
async def test_malformed_source_secret_is_a_retrieval_failure(secret_value, expected: str) -> None:
    store = FakeSecretStore({SOURCE: secret_value})
    token_client = StubTokenClient()

    result = await _service(store, token_client).rotate()

    assert result.status_code == 500
    assert expected in result.message
    assert SOURCE in result.message
    assert token_client.calls == []
    assert store.writes == []


@pytest.mark.asyncio
async def test_write_failure_is_reported() -> None:
    store = FakeSecretStore({SOURCE: SOURCE_RECORD})
    store.write_error = SecretUpdateError("User is not authorized", secret_name=TARGET)

    result = await _service(store, StubTokenClient()).rotate()

    assert result.status_code == 500
    assert result.message == "User is not authorized"


@pytest.mark.asyncio
async def test_unexpected_errors_map_to_failure_result() -> None:
    store = FakeSecretStore(read_error=RuntimeError("boom"))

    result = await _service(store, StubTokenClient()).rotate()

    assert result.status_code == 500
    assert result.message == "boom"


def test_rotation_result_response_shape() -> None:
    assert RotationResult.failure("nope").to_response() == {
        "statusCode": 500,
        "body": '{"message": "nope"}',
    }
    assert RotationResult.success().ok
