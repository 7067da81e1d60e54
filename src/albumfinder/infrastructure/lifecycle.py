"""Session lifecycle: wiring at startup, cleanup at shutdown.

Startup:
1. Configure logging from settings
2. Build the credential cell, provider, catalog client, controller and player
3. Start the one-time credential exchange in the background

Shutdown:
1. Stop any playing preview
2. Abandon an exchange still in flight
3. Close the shared HTTP client pool (unless the caller injected a client)

Usage:
    async with browse_session() as session:
        await session.credentials.acquire()
        await session.controller.submit_search("Radiohead")
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass

import httpx

from albumfinder.application.services import BrowseController, PreviewPlayer
from albumfinder.config import Settings, get_settings
from albumfinder.domain.entities import CredentialCell
from albumfinder.domain.ports import IAudioOutput
from albumfinder.infrastructure.audio import LoggingAudioOutput
from albumfinder.infrastructure.integrations import (
    CatalogClient,
    CredentialProvider,
    HttpClientPool,
)
from albumfinder.infrastructure.observability import configure_logging

logger = logging.getLogger(__name__)


@dataclass
class BrowseSession:
    """Everything the presentation layer talks to."""

    settings: Settings
    credentials: CredentialProvider
    catalog: CatalogClient
    controller: BrowseController
    player: PreviewPlayer


@asynccontextmanager
async def browse_session(
    settings: Settings | None = None,
    audio: IAudioOutput | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncGenerator[BrowseSession, None]:
    """Build a wired BrowseSession and tear it down on exit.

    Args:
        settings: Settings to use (defaults to get_settings())
        audio: Audio output for previews (defaults to LoggingAudioOutput)
        http_client: Client for all HTTP traffic; the caller keeps ownership.
            Defaults to the shared HttpClientPool, which is closed on exit.

    Yields:
        The session
    """
    settings = settings or get_settings()
    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting session: %s", settings.app_name)

    if not settings.catalog.is_configured:
        logger.warning(
            "SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET missing - searches will be rejected"
        )

    cell = CredentialCell()
    credentials = CredentialProvider(settings.catalog, cell, http_client)
    catalog = CatalogClient(settings.catalog, cell, http_client)
    controller = BrowseController(catalog, credentials)
    player = PreviewPlayer(controller, audio or LoggingAudioOutput())

    exchange = credentials.start()
    try:
        yield BrowseSession(
            settings=settings,
            credentials=credentials,
            catalog=catalog,
            controller=controller,
            player=player,
        )
    finally:
        logger.info("Shutting down session")
        player.stop_all()

        if not exchange.done():
            credentials.cancel()
            exchange.cancel()
            with suppress(asyncio.CancelledError):
                await exchange

        if http_client is None:
            await HttpClientPool.close()
