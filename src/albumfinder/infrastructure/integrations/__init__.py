"""External service integrations (catalog API, token endpoint)."""

from albumfinder.infrastructure.integrations.catalog_client import CatalogClient
from albumfinder.infrastructure.integrations.credential_provider import (
    CredentialProvider,
)
from albumfinder.infrastructure.integrations.http_pool import HttpClientPool

__all__ = ["CatalogClient", "CredentialProvider", "HttpClientPool"]
