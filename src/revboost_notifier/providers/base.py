"""Provider client interface and shared HTTP transport."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import requests

from revboost_notifier import transport
from revboost_notifier.enums import Channel
from revboost_notifier.models import RenderedMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """A rendered message addressed to one recipient."""

    recipient: str
    rendered: RenderedMessage
    tags: dict[str, str] = field(default_factory=dict)
    reply_to: str | None = None


@dataclass(frozen=True, slots=True)
class ProviderAck:
    """Provider acknowledgement of an accepted message."""

    provider_id: str
    status: str


class ProviderError(Exception):
    """Base class for classified provider call failures."""


class ProviderNotConfiguredError(ProviderError):
    pass


class ProviderHTTPError(ProviderError):
    """The provider responded with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None) -> None:
        super().__init__(f"HTTP {status_code}: {message or 'no message'}")
        self.status_code = status_code
        self.message = message


class ProviderTimeoutError(ProviderError):
    pass


class ProviderConnectionError(ProviderError):
    pass


class ProviderClient(ABC):
    """Base class for channel delivery clients."""

    channel: Channel

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when all credentials needed to send are present."""

    @abstractmethod
    def send(self, message: OutboundMessage, *, timeout: float) -> ProviderAck:
        """Deliver *message* with a single request.

        Raises a ProviderError subclass for configuration, HTTP and
        transport failures.
        """


def post(url: str, *, timeout: float, **kwargs: Any) -> dict[str, Any]:
    """POST to a provider API and return the decoded JSON body.

    ``timeout`` bounds the whole exchange, body included. Translates requests
    exceptions and non-2xx responses into ProviderError subclasses so callers
    never handle transport exceptions directly.
    """
    try:
        response = transport.post(url, timeout=timeout, **kwargs)
    except requests.Timeout as exc:
        raise ProviderTimeoutError(f"Timed out after {timeout}s") from exc
    except (
        requests.ConnectionError,
        requests.exceptions.ChunkedEncodingError,
        requests.exceptions.ContentDecodingError,
    ) as exc:
        raise ProviderConnectionError(str(exc)) from exc

    if not response.ok:
        message = _error_message(response)
        logger.error(
            "Provider API error",
            extra={"url": url, "status_code": response.status_code, "provider_message": message},
        )
        raise ProviderHTTPError(response.status_code, message)

    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(response: transport.BoundedResponse) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def acknowledge(data: dict[str, Any], *, id_key: str, default_status: str) -> ProviderAck:
    """Build an ack from a 2xx body, warning when the provider sent no id."""
    provider_id = data.get(id_key)
    if not provider_id:
        logger.warning(
            "Provider accepted message without an identifier",
            extra={"id_key": id_key},
        )
    return ProviderAck(
        provider_id=str(provider_id or ""),
        status=str(data.get("status") or default_status),
    )
