"""Slack incoming-webhook notifier signalling the end of a run."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx
import msgspec

from logtrawl.logging import get_logger, log_info

from .errors import NotificationError

logger = get_logger(__name__)

DEFAULT_ICON_URL = (
    "https://raw.githubusercontent.com/tenntenn/gopher-stickers/master/png/ok.png"
)


class SlackPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of an incoming-webhook message."""

    text: str
    username: str
    icon_emoji: str = ""
    icon_url: str = ""
    channel: str = ""


@dataclasses.dataclass(frozen=True, slots=True)
class SlackConfig:
    """Where and how the completion message is posted."""

    webhook_url: str
    text: str = "Loggly log download finished."
    username: str = "gopher"
    icon_emoji: str = ""
    icon_url: str = DEFAULT_ICON_URL
    channel: str = "#notification"
    timeout_s: float | None = 10.0

    def payload(self) -> SlackPayload:
        """Return the message body for this configuration."""
        return SlackPayload(
            text=self.text,
            username=self.username,
            icon_emoji=self.icon_emoji,
            icon_url=self.icon_url,
            channel=self.channel,
        )


class Notifier(typ.Protocol):
    """Completion signal fired once per run."""

    async def notify(self) -> None:
        """Deliver the completion signal."""
        ...


class SlackNotifier:
    """Post the completion message to a Slack incoming webhook."""

    def __init__(
        self,
        config: SlackConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the notifier; an injected ``http_client`` is not closed."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_s),
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def notify(self) -> None:
        """Post the message as a form-encoded ``payload`` field.

        Raises
        ------
        NotificationError
            If the webhook cannot be reached or answers with a non-2xx status.

        """
        body = msgspec.json.encode(self._config.payload()).decode("utf-8")
        try:
            response = await self._client.post(
                self._config.webhook_url,
                data={"payload": body},
            )
        except httpx.RequestError as exc:
            raise NotificationError.network_error(str(exc)) from exc

        if not response.is_success:
            raise NotificationError.http_error(response.status_code, response.text)
        log_info(logger, "notification delivered to %s", self._config.channel)
