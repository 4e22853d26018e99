"""Provider registry for channel-based delivery."""

from revboost_notifier.config import EmailProviderConfig, SmsProviderConfig
from revboost_notifier.enums import Channel
from revboost_notifier.providers.base import ProviderClient
from revboost_notifier.providers.email import ResendEmailClient
from revboost_notifier.providers.sms import TwilioSmsClient


class ProviderRegistry:
    """Maps channels to provider client instances."""

    def __init__(self) -> None:
        self._clients: dict[Channel, ProviderClient] = {}

    def register(self, channel: Channel, client: ProviderClient) -> None:
        self._clients[channel] = client

    def get(self, channel: Channel) -> ProviderClient:
        """Return the client for a channel.

        Raises KeyError if no client is registered for the channel.
        """
        return self._clients[channel]

    def channels(self) -> list[Channel]:
        return list(self._clients)


def create_default_registry(
    email_config: EmailProviderConfig,
    sms_config: SmsProviderConfig,
) -> ProviderRegistry:
    """Create a registry with the Resend and Twilio clients."""
    registry = ProviderRegistry()
    registry.register(Channel.EMAIL, ResendEmailClient(email_config))
    registry.register(Channel.SMS, TwilioSmsClient(sms_config))
    return registry
