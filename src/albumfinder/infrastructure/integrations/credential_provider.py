"""Client-credentials exchange for the catalog API.

The exchange runs once per session. Callers that arrive while it is in
flight all await the same task; once it has failed, every later acquire()
re-raises the stored error without touching the network again.
"""

import asyncio
import logging
from typing import Any

import httpx

from albumfinder.config.settings import CatalogSettings
from albumfinder.domain.entities import Credential, CredentialCell
from albumfinder.domain.exceptions import (
    AuthError,
    AuthUnavailableError,
    AuthUnreachableError,
    ConfigurationError,
)
from albumfinder.domain.ports import CredentialStatus, ICredentialProvider
from albumfinder.infrastructure.integrations.http_pool import HttpClientPool
from albumfinder.infrastructure.observability.log_messages import LogMessages

logger = logging.getLogger(__name__)


class CredentialProvider(ICredentialProvider):
    """Obtains the session bearer token and stores it in a CredentialCell."""

    def __init__(
        self,
        settings: CatalogSettings,
        cell: CredentialCell,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            settings: Catalog settings with client id/secret and token URL
            cell: Cell the credential is written into (once)
            http_client: Optional client; defaults to the shared pool
        """
        self.settings = settings
        self._cell = cell
        self._http_client = http_client
        self._inflight: asyncio.Task[Credential] | None = None
        self._failure: AuthError | None = None

    @property
    def cell(self) -> CredentialCell:
        return self._cell

    @property
    def status(self) -> CredentialStatus:
        if self._cell.is_set:
            return CredentialStatus.READY
        if self._failure is not None:
            return CredentialStatus.FAILED
        return CredentialStatus.PENDING

    @property
    def failure(self) -> AuthError | None:
        return self._failure

    def start(self) -> asyncio.Task[Credential]:
        """Kick off acquisition in the background (called once at startup).

        Failures are already logged and recorded by the exchange, so the
        task's exception is consumed here instead of warning at GC time.
        """
        task = asyncio.create_task(self.acquire(), name="credential-exchange")
        task.add_done_callback(_consume_task_result)
        return task

    async def acquire(self) -> Credential:
        """
        Obtain the credential, running the exchange at most once.

        Returns:
            The session credential

        Raises:
            AuthUnavailableError: Token endpoint gave no usable token
            AuthUnreachableError: Token endpoint could not be reached
        """
        credential = self._cell.get()
        if credential is not None:
            return credential
        if self._failure is not None:
            raise self._failure

        if self._inflight is None:
            self._inflight = asyncio.create_task(self._exchange())
        # shield: one impatient caller being cancelled must not cancel the
        # exchange the others are waiting on
        return await asyncio.shield(self._inflight)

    def cancel(self) -> None:
        """Abandon an exchange that is still in flight (session shutdown).

        Cancellation is not a failure: status stays PENDING, and a later
        acquire() starts a fresh exchange instead of awaiting the dead task.
        """
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            self._inflight = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await HttpClientPool.get_client(timeout=self.settings.request_timeout)

    async def _exchange(self) -> Credential:
        try:
            credential = await self._request_token()
        except AuthError as e:
            self._failure = e
            logger.error(
                LogMessages.token_exchange_failed(
                    endpoint=self.settings.token_url, error=e.message
                )
            )
            raise

        self._cell.set(credential)
        logger.info(LogMessages.token_acquired(credential.expires_in))
        return credential

    async def _request_token(self) -> Credential:
        if not self.settings.is_configured:
            raise AuthUnavailableError(
                "Catalog client id and secret are not configured"
            ) from ConfigurationError(
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be set"
            )

        client = await self._get_client()
        data = {
            "grant_type": "client_credentials",
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret.get_secret_value(),
        }

        try:
            response = await client.post(
                self.settings.token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise AuthUnreachableError() from e

        # The token is the only thing that counts: a 200 without one is as
        # useless as a 400 with an error body.
        try:
            payload: Any = response.json()
        except ValueError as e:
            raise AuthUnavailableError(http_status=response.status_code) from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token or not isinstance(token, str):
            raise AuthUnavailableError(http_status=response.status_code)

        expires_in = payload.get("expires_in")
        return Credential(
            access_token=token,
            token_type=payload.get("token_type") or "Bearer",
            expires_in=expires_in if isinstance(expires_in, int) else None,
        )


def _consume_task_result(task: asyncio.Task[Credential]) -> None:
    if not task.cancelled():
        task.exception()
