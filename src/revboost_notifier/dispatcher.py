"""Dispatch core: validate, render, deliver, classify."""

import logging

from revboost_notifier.enums import NotificationKind
from revboost_notifier.errors import (
    DispatchFailure,
    InternalError,
    ProviderRejected,
    ProviderUnconfigured,
    ProviderUnreachable,
)
from revboost_notifier.log import mask_recipient
from revboost_notifier.models import DispatchResult, MessageFields, NotificationRequest
from revboost_notifier.providers import ProviderRegistry
from revboost_notifier.providers.base import (
    OutboundMessage,
    ProviderConnectionError,
    ProviderHTTPError,
    ProviderNotConfiguredError,
    ProviderTimeoutError,
)
from revboost_notifier.renderer import TemplateRenderer
from revboost_notifier.validation import validate_request

logger = logging.getLogger(__name__)

DISPATCH_TIMEOUT_SECONDS = 10.0

_REJECTED_FALLBACK = "Failed to send notification"

_TAG_TYPES = {
    NotificationKind.REVIEW_REQUEST: "review_request",
    NotificationKind.TEST: "test",
    NotificationKind.FEEDBACK_ALERT: "feedback_notification",
}


class Dispatcher:
    """Runs one notification request through to a single provider call.

    No retries: each ``dispatch`` call makes at most one provider request.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        renderer: TemplateRenderer,
        timeout: float = DISPATCH_TIMEOUT_SECONDS,
    ) -> None:
        self._registry = registry
        self._renderer = renderer
        self._timeout = timeout

    def dispatch(self, request: NotificationRequest) -> DispatchResult:
        """Deliver *request* and return the provider's acknowledgement.

        Raises a DispatchFailure subclass on any failure.
        """
        log_ctx = {
            "channel": str(request.channel),
            "kind": str(request.kind),
            "recipient": mask_recipient(request.recipient),
        }

        validate_request(request)

        try:
            client = self._registry.get(request.channel)
        except KeyError:
            client = None
        if client is None or not client.is_configured:
            logger.error("Provider not configured", extra=log_ctx)
            raise ProviderUnconfigured(str(request.channel))

        try:
            rendered = self._renderer.render(
                request.kind, request.channel, MessageFields.from_request(request)
            )
        except DispatchFailure:
            raise
        except Exception as exc:
            logger.exception("Template rendering failed", extra=log_ctx)
            raise InternalError(repr(exc)) from exc
        message = OutboundMessage(
            recipient=request.recipient.strip(),
            rendered=rendered,
            tags=self._tags_for(request),
            reply_to=request.reply_to,
        )

        logger.info("Sending notification", extra=log_ctx)
        try:
            ack = client.send(message, timeout=self._timeout)
        except ProviderNotConfiguredError as exc:
            logger.error("Provider not configured", extra=log_ctx)
            raise ProviderUnconfigured(str(request.channel)) from exc
        except ProviderHTTPError as exc:
            logger.warning(
                "Provider rejected notification",
                extra={**log_ctx, "status_code": exc.status_code},
            )
            raise ProviderRejected(exc.status_code, exc.message or _REJECTED_FALLBACK) from exc
        except (ProviderTimeoutError, ProviderConnectionError) as exc:
            logger.warning(
                "Provider unreachable", extra={**log_ctx, "cause": str(exc)}
            )
            raise ProviderUnreachable(str(exc)) from exc
        except DispatchFailure:
            raise
        except Exception as exc:
            logger.exception("Unexpected error during dispatch", extra=log_ctx)
            raise InternalError(repr(exc)) from exc

        logger.info(
            "Notification sent",
            extra={**log_ctx, "provider_id": ack.provider_id, "provider_status": ack.status},
        )
        return DispatchResult(
            provider_id=ack.provider_id,
            provider_status=ack.status,
            channel=request.channel,
            kind=request.kind,
        )

    @staticmethod
    def _tags_for(request: NotificationRequest) -> dict[str, str]:
        tags = {"type": _TAG_TYPES[request.kind]}
        if request.kind == NotificationKind.REVIEW_REQUEST and request.business_name:
            tags["business"] = request.business_name
        if request.kind == NotificationKind.FEEDBACK_ALERT:
            if request.business_id:
                tags["business_id"] = request.business_id
            tags["rating"] = str(request.rating)
        return tags
