"""Telegram notifier: one sendMessage call per debrief."""

import logging
from typing import Protocol

import httpx

from debrief.core.config import Settings
from debrief.core.errors import DeliveryFailure
from debrief.models.summary import DeliveryResult

logger = logging.getLogger(__name__)

SENT_MESSAGE = "Message sent successfully."


class Notifier(Protocol):
    async def deliver(self, text: str) -> DeliveryResult: ...


class TelegramNotifier:
    """Posts to the Bot API. deliver() never raises."""

    def __init__(
        self,
        *,
        bot_token: str,
        chat_id: str,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._api_base}/bot{self._bot_token}/sendMessage"

    async def _send(self, text: str) -> None:
        """Raise DeliveryFailure unless the channel replies ok: true."""
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout
            ) as client:
                resp = await client.post(
                    self.url, json={"chat_id": self._chat_id, "text": text}
                )
            result = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DeliveryFailure(str(e).strip() or type(e).__name__) from e
        if not isinstance(result, dict):
            raise DeliveryFailure(f"Unexpected response (HTTP {resp.status_code})")
        # Telegram answers 4xx with ok:false and a description
        if not result.get("ok"):
            raise DeliveryFailure(
                result.get("description") or f"HTTP {resp.status_code}",
                rejected=True,
            )

    async def deliver(self, text: str) -> DeliveryResult:
        try:
            await self._send(text)
        except DeliveryFailure as e:
            if e.rejected:
                logger.error("Telegram API Error: %s", e.reason)
                message = f"Telegram API Error: {e.reason}"
            else:
                logger.error("Failed to send Telegram message: %s", e.reason)
                message = f"Failed to send message: {e.reason}"
            return DeliveryResult(success=False, message=message, detail=e.reason)
        except Exception as e:
            reason = str(e).strip() or type(e).__name__
            logger.exception("Unexpected error sending Telegram message")
            return DeliveryResult(
                success=False, message=f"Failed to send message: {reason}", detail=reason
            )
        return DeliveryResult(success=True, message=SENT_MESSAGE)


def build_notifier(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> TelegramNotifier:
    """Raises ConfigurationMissing when the bot token or chat id is unset."""
    bot_token, chat_id = settings.require_delivery_credentials()
    return TelegramNotifier(
        bot_token=bot_token,
        chat_id=chat_id,
        api_base=settings.telegram_api_base,
        timeout=settings.telegram_timeout_seconds,
        transport=transport,
    )
