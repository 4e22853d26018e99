"""Email delivery through the Resend HTTP API."""

import logging
import re
from typing import Any

from revboost_notifier.config import EmailProviderConfig
from revboost_notifier.enums import Channel
from revboost_notifier.providers import base
from revboost_notifier.providers.base import (
    OutboundMessage,
    ProviderAck,
    ProviderClient,
    ProviderNotConfiguredError,
)

logger = logging.getLogger(__name__)

_TAG_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def _tag_value(value: str) -> str:
    # Resend only accepts ASCII letters, digits, underscores and dashes.
    return _TAG_UNSAFE.sub("_", value)[:256]


class ResendEmailClient(ProviderClient):
    """Sends HTML email as ``{from, to, subject, html, tags}``."""

    channel = Channel.EMAIL

    def __init__(self, config: EmailProviderConfig) -> None:
        self._api_key = config.api_key
        self._api_url = config.api_url
        self.sender = f"{config.from_name} <{config.from_address}>"
        if not self._api_key:
            logger.error("Email API key is missing; email delivery is disabled")

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def send(self, message: OutboundMessage, *, timeout: float) -> ProviderAck:
        if not self.is_configured:
            raise ProviderNotConfiguredError("Email API key is not configured")

        payload: dict[str, Any] = {
            "from": self.sender,
            "to": message.recipient,
            "subject": message.rendered.subject or "",
            "html": message.rendered.body,
            "tags": [
                {"name": name, "value": _tag_value(value)}
                for name, value in message.tags.items()
            ],
        }
        if message.reply_to:
            payload["reply_to"] = message.reply_to

        data = base.post(
            self._api_url,
            timeout=timeout,
            json=payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        return base.acknowledge(data, id_key="id", default_status="sent")
