"""SMS delivery through the Twilio Messages REST API."""

import logging

from revboost_notifier.config import SmsProviderConfig
from revboost_notifier.enums import Channel
from revboost_notifier.providers import base
from revboost_notifier.providers.base import (
    OutboundMessage,
    ProviderAck,
    ProviderClient,
    ProviderNotConfiguredError,
)

logger = logging.getLogger(__name__)


class TwilioSmsClient(ProviderClient):
    """Sends plain-text SMS as ``{From, To, Body}`` with basic auth."""

    channel = Channel.SMS

    def __init__(self, config: SmsProviderConfig) -> None:
        self._account_sid = config.account_sid
        self._auth_token = config.auth_token
        self._from_number = config.phone_number
        self._base_url = config.api_base_url.rstrip("/")

        if not self._account_sid or not self._auth_token:
            logger.error("Twilio account SID or auth token is missing; SMS delivery is disabled")
        if not self._from_number:
            logger.warning("Twilio sender number is missing; SMS delivery is disabled")

    @property
    def is_configured(self) -> bool:
        return bool(self._account_sid and self._auth_token and self._from_number)

    @property
    def messages_url(self) -> str:
        return f"{self._base_url}/2010-04-01/Accounts/{self._account_sid}/Messages.json"

    def send(self, message: OutboundMessage, *, timeout: float) -> ProviderAck:
        if not self.is_configured:
            raise ProviderNotConfiguredError("Twilio is not fully configured")

        data = base.post(
            self.messages_url,
            timeout=timeout,
            data={
                "From": self._from_number,
                "To": message.recipient,
                "Body": message.rendered.body,
            },
            auth=(self._account_sid, self._auth_token),
        )
        return base.acknowledge(data, id_key="sid", default_status="queued")
