"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message lives on the instance so the controller can show it
    # to the user without parsing str(exc). Don't raise this directly - use a subclass.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvalidStateException(DomainException):
    """Raised when an object is in an invalid state for the requested operation.

    Example: selecting an album while no album listing is on screen, or
    storing a second credential into an already-filled cell.
    """

    pass


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Example:
        raise ConfigurationError("SPOTIFY_CLIENT_ID is not configured")
    """

    pass


# =============================================================================
# Authentication (client-credentials exchange)
# =============================================================================


class AuthError(DomainException):
    """The bearer credential could not be obtained.

    Terminal for the session - nothing retries the exchange.
    """

    pass


class AuthUnavailableError(AuthError):
    """Token endpoint answered, but without a usable access token."""

    def __init__(
        self,
        message: str = "Could not authenticate with the catalog service",
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status


class AuthUnreachableError(AuthError):
    """Token endpoint could not be reached at all."""

    def __init__(
        self, message: str = "Could not connect to the catalog service"
    ) -> None:
        super().__init__(message)


# =============================================================================
# Catalog lookups
# =============================================================================


class CatalogError(DomainException):
    """A catalog lookup failed."""

    pass


class CatalogUnauthenticatedError(CatalogError):
    """A catalog call was attempted before a credential was available."""

    def __init__(
        self, message: str = "No catalog credential is available yet"
    ) -> None:
        super().__init__(message)


class CatalogNotFoundError(CatalogError):
    """Artist search returned an empty result set."""

    def __init__(self, query: str) -> None:
        super().__init__(f'No artist found for "{query}"')
        self.query = query


class CatalogTransportError(CatalogError):
    """Non-2xx status, malformed payload or no response at all.

    status is None when the request never produced a response.
    """

    def __init__(self, status: int | None, message: str | None = None) -> None:
        if message is None:
            message = (
                f"Catalog request failed with HTTP {status}"
                if status is not None
                else "Catalog request failed: service unreachable"
            )
        super().__init__(message)
        self.status = status


# =============================================================================
# Entry-point validation (never reaches the network)
# =============================================================================


class ValidationError(DomainException):
    """Input was rejected locally before any request was issued."""

    pass


class EmptyQueryError(ValidationError):
    """Search text was empty or whitespace only."""

    def __init__(self, message: str = "Please enter an artist name") -> None:
        super().__init__(message)


class NotAuthenticatedError(ValidationError):
    """Search submitted while no credential is present.

    credential_failed tells "still waiting for the exchange" apart from
    "the exchange failed and nothing will ever succeed this session".
    """

    def __init__(self, credential_failed: bool = False) -> None:
        message = (
            "Authentication with the catalog service failed; restart to try again"
            if credential_failed
            else "Waiting for authentication with the catalog service..."
        )
        super().__init__(message)
        self.credential_failed = credential_failed


__all__ = [
    # Base
    "DomainException",
    "EntityNotFoundException",
    "InvalidStateException",
    "ConfigurationError",
    # Auth
    "AuthError",
    "AuthUnavailableError",
    "AuthUnreachableError",
    # Catalog
    "CatalogError",
    "CatalogUnauthenticatedError",
    "CatalogNotFoundError",
    "CatalogTransportError",
    # Validation
    "ValidationError",
    "EmptyQueryError",
    "NotAuthenticatedError",
]
