"""Tests for CredentialProvider - the one-shot client-credentials exchange."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from albumfinder.config.settings import CatalogSettings
from albumfinder.domain.entities import CredentialCell
from albumfinder.domain.exceptions import (
    AuthUnavailableError,
    AuthUnreachableError,
    ConfigurationError,
)
from albumfinder.domain.ports import CredentialStatus
from albumfinder.infrastructure.integrations.credential_provider import (
    CredentialProvider,
)

TOKEN_BODY = {"access_token": "BQD-token", "token_type": "Bearer", "expires_in": 3600}


@pytest.fixture
def catalog_settings() -> CatalogSettings:
    return CatalogSettings(client_id="client-abc", client_secret="secret-xyz")


class Recorder:
    """MockTransport handler that records requests and replies with a fixed response."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _provider(
    settings: CatalogSettings, recorder: Recorder
) -> tuple[CredentialProvider, CredentialCell]:
    cell = CredentialCell()
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return CredentialProvider(settings, cell, client), cell


class TestSuccessfulExchange:
    """Happy-path exchange."""

    async def test_acquire_fills_cell(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(200, json=TOKEN_BODY))
        provider, cell = _provider(catalog_settings, recorder)

        assert provider.status == CredentialStatus.PENDING

        credential = await provider.acquire()

        assert credential.access_token == "BQD-token"
        assert credential.expires_in == 3600
        assert cell.get() is credential
        assert provider.status == CredentialStatus.READY
        assert provider.failure is None

    async def test_request_is_form_encoded_client_credentials(
        self, catalog_settings
    ) -> None:
        recorder = Recorder(httpx.Response(200, json=TOKEN_BODY))
        provider, _ = _provider(catalog_settings, recorder)

        await provider.acquire()

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://accounts.spotify.com/api/token"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["client_credentials"]
        assert form["client_id"] == ["client-abc"]
        assert form["client_secret"] == ["secret-xyz"]

    async def test_concurrent_callers_share_one_exchange(
        self, catalog_settings
    ) -> None:
        recorder = Recorder(httpx.Response(200, json=TOKEN_BODY))
        provider, _ = _provider(catalog_settings, recorder)

        results = await asyncio.gather(*(provider.acquire() for _ in range(5)))

        assert len(recorder.requests) == 1
        assert all(r is results[0] for r in results)

    async def test_later_acquire_reuses_cell(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(200, json=TOKEN_BODY))
        provider, _ = _provider(catalog_settings, recorder)

        first = await provider.acquire()
        second = await provider.acquire()

        assert first is second
        assert len(recorder.requests) == 1

    async def test_start_runs_exchange_in_background(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(200, json=TOKEN_BODY))
        provider, cell = _provider(catalog_settings, recorder)

        task = provider.start()
        await task

        assert cell.is_set
        assert task.get_name() == "credential-exchange"

    async def test_missing_token_type_defaults_to_bearer(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(200, json={"access_token": "abc"}))
        provider, _ = _provider(catalog_settings, recorder)

        credential = await provider.acquire()

        assert credential.authorization_header == "Bearer abc"
        assert credential.expires_in is None


class TestFailedExchange:
    """A failed exchange is recorded and terminal."""

    async def test_response_without_token(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(200, json={"token_type": "Bearer"}))
        provider, cell = _provider(catalog_settings, recorder)

        with pytest.raises(AuthUnavailableError) as exc_info:
            await provider.acquire()

        assert exc_info.value.http_status == 200
        assert provider.status == CredentialStatus.FAILED
        assert provider.failure is exc_info.value
        assert not cell.is_set

    async def test_error_response(self, catalog_settings) -> None:
        recorder = Recorder(
            httpx.Response(400, json={"error": "invalid_client"})
        )
        provider, _ = _provider(catalog_settings, recorder)

        with pytest.raises(AuthUnavailableError) as exc_info:
            await provider.acquire()

        assert exc_info.value.http_status == 400

    async def test_non_json_response(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(502, text="Bad Gateway"))
        provider, _ = _provider(catalog_settings, recorder)

        with pytest.raises(AuthUnavailableError):
            await provider.acquire()

    async def test_unreachable_endpoint(self, catalog_settings) -> None:
        recorder = Recorder(httpx.ConnectError("Name or service not known"))
        provider, _ = _provider(catalog_settings, recorder)

        with pytest.raises(AuthUnreachableError):
            await provider.acquire()

        assert provider.status == CredentialStatus.FAILED

    async def test_failure_is_not_retried(self, catalog_settings) -> None:
        recorder = Recorder(httpx.Response(401, json={"error": "invalid_client"}))
        provider, _ = _provider(catalog_settings, recorder)

        with pytest.raises(AuthUnavailableError):
            await provider.acquire()
        recorder.response = httpx.Response(200, json=TOKEN_BODY)
        with pytest.raises(AuthUnavailableError):
            await provider.acquire()

        assert len(recorder.requests) == 1

    async def test_unconfigured_makes_no_request(self) -> None:
        recorder = Recorder(httpx.Response(200, json=TOKEN_BODY))
        provider, _ = _provider(CatalogSettings(client_id="", client_secret=""), recorder)

        with pytest.raises(AuthUnavailableError) as exc_info:
            await provider.acquire()

        assert isinstance(exc_info.value.__cause__, ConfigurationError)
        assert recorder.requests == []
        assert provider.status == CredentialStatus.FAILED

    async def test_background_failure_is_recorded(
        self, catalog_settings
    ) -> None:
        recorder = Recorder(httpx.Response(500, text="oops"))
        provider, _ = _provider(catalog_settings, recorder)

        task = provider.start()
        with pytest.raises(AuthUnavailableError):
            await task

        assert provider.status == CredentialStatus.FAILED


class TestCancel:
    """cancel() on shutdown."""

    async def test_cancel_inflight_exchange(self, catalog_settings) -> None:
        release = asyncio.Event()

        async def slow(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json=TOKEN_BODY)

        cell = CredentialCell()
        provider = CredentialProvider(
            catalog_settings,
            cell,
            httpx.AsyncClient(transport=httpx.MockTransport(slow)),
        )

        task = provider.start()
        await asyncio.sleep(0)
        provider.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert not cell.is_set
        assert provider.status == CredentialStatus.PENDING

    def test_cancel_without_exchange_is_noop(self, catalog_settings) -> None:
        provider = CredentialProvider(catalog_settings, CredentialCell())
        provider.cancel()
        assert provider.status == CredentialStatus.PENDING

    async def test_acquire_after_cancel_starts_fresh_exchange(
        self, catalog_settings
    ) -> None:
        first_request = asyncio.Event()
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                first_request.set()
                await asyncio.Event().wait()
            return httpx.Response(200, json=TOKEN_BODY)

        cell = CredentialCell()
        provider = CredentialProvider(
            catalog_settings,
            cell,
            httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        task = provider.start()
        await first_request.wait()
        provider.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        credential = await provider.acquire()

        assert credential.access_token == "BQD-token"
        assert cell.get() is credential
        assert calls == 2
