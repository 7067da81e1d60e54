"""Application settings loaded from environment variables and .env."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogSettings(BaseSettings):
    """Catalog API (Spotify Web API) configuration.

    Hey future me - client_id/client_secret come from the Spotify developer
    dashboard. Only the client-credentials grant is used, so no redirect URI.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_", env_file=".env", extra="ignore"
    )

    client_id: str = Field(default="", description="OAuth client id")
    client_secret: SecretStr = Field(
        default=SecretStr(""), description="OAuth client secret"
    )
    token_url: str = Field(
        default="https://accounts.spotify.com/api/token",  # nosec B105 - public endpoint URL
        description="Client-credentials token endpoint",
    )
    api_base_url: str = Field(
        default="https://api.spotify.com/v1", description="Catalog API base URL"
    )
    market: str = Field(
        default="US",
        min_length=2,
        max_length=2,
        description="ISO 3166-1 alpha-2 market for album listings",
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="Per-request timeout in seconds"
    )

    @property
    def is_configured(self) -> bool:
        """True when both client id and secret are present."""
        return bool(
            self.client_id.strip() and self.client_secret.get_secret_value().strip()
        )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore"
    )

    log_json_format: bool = Field(
        default=False, description="Emit JSON log lines instead of text"
    )


class Settings(BaseSettings):
    """Top-level settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="albumfinder")
    log_level: str = Field(default="INFO")

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    observability: ObservabilitySettings = Field(
        default_factory=ObservabilitySettings
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
