"""Structured log message templates.

Recurring messages (auth failures, catalog failures, discarded results) are
built here so they look the same wherever they are logged:

    🔴 Token Exchange Failed
    ├─ Endpoint: https://accounts.spotify.com/api/token
    ├─ Reason: HTTP 400
    └─ 💡 Check SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET

Usage:
    logger.error(LogMessages.token_exchange_failed(endpoint=url, error="HTTP 400"))
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class LogTemplate:
    """A log message with an icon, a title, tree-style fields and an optional hint."""

    icon: str
    title: str
    fields: dict[str, str]
    hint: str | None = None

    def format(self, **kwargs: Any) -> str:
        """Render the template, filling {placeholders} from kwargs."""
        lines = [f"{self.icon} {self.title}"]

        items = list(self.fields.items())
        for i, (key, value_template) in enumerate(items):
            prefix = "└─" if i == len(items) - 1 and not self.hint else "├─"
            try:
                value = value_template.format(**kwargs) if kwargs else value_template
            except KeyError as e:
                value = f"<missing: {e}>"
            lines.append(f"{prefix} {key}: {value}")

        if self.hint:
            lines.append(f"└─ 💡 {self.hint}")

        return "\n".join(lines)


class LogMessages:
    """Collection of standardized log message templates."""

    # === Authentication ===

    @staticmethod
    def token_exchange_failed(
        endpoint: str, error: str, hint: str | None = None
    ) -> str:
        """Format a failed client-credentials exchange.

        Args:
            endpoint: Token endpoint URL
            error: What went wrong
            hint: Custom troubleshooting hint
        """
        return LogTemplate(
            icon="🔴",
            title="Token Exchange Failed",
            fields={"Endpoint": endpoint, "Reason": error},
            hint=hint or "Check SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET",
        ).format()

    @staticmethod
    def token_acquired(expires_in: int | None) -> str:
        """Format a successful exchange."""
        fields = {"Expires in": f"{expires_in}s" if expires_in else "unknown"}
        return LogTemplate(
            icon="✅", title="Catalog Credential Acquired", fields=fields
        ).format()

    # === Catalog ===

    @staticmethod
    def catalog_request_failed(
        operation: str, target: str, status: int | None, error: str | None = None
    ) -> str:
        """Format a failed catalog lookup.

        Args:
            operation: Lookup name (search_artist, list_albums, list_tracks)
            target: Request URL
            status: HTTP status, None when there was no response
            error: Error message from exception
        """
        fields = {
            "Operation": operation,
            "Target": target,
            "Status": str(status) if status is not None else "no response",
        }
        if error:
            fields["Reason"] = error
        return LogTemplate(
            icon="🔴", title="Catalog Request Failed", fields=fields
        ).format()

    # === Browse state machine ===

    @staticmethod
    def stale_result_discarded(stage: str, epoch: int, current: int) -> str:
        """Format a superseded completion that was dropped."""
        return LogTemplate(
            icon="⏭️",
            title="Stale Result Discarded",
            fields={"Stage": stage, "Epoch": str(epoch), "Current": str(current)},
        ).format()
