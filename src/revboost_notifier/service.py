"""Inbound operation surface used by the HTTP layer."""

import logging
from collections.abc import Mapping
from typing import Any, Self

from pydantic import ValidationError as PydanticValidationError

from revboost_notifier.config import (
    EmailProviderConfig,
    LivenessConfig,
    ServiceConfig,
    SmsProviderConfig,
)
from revboost_notifier.dispatcher import Dispatcher
from revboost_notifier.enums import Channel, NotificationKind
from revboost_notifier.errors import ValidationError
from revboost_notifier.liveness import (
    HttpSelfCheck,
    LivenessCounters,
    LivenessPolicy,
    LivenessScheduler,
    LivenessSnapshot,
)
from revboost_notifier.models import DispatchResult, NotificationRequest
from revboost_notifier.providers import ProviderRegistry, create_default_registry
from revboost_notifier.renderer import TemplateRenderer

logger = logging.getLogger(__name__)


class NotificationService:
    """Owns the dispatcher, provider registry and liveness state."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        registry: ProviderRegistry,
        counters: LivenessCounters,
        scheduler: LivenessScheduler | None = None,
        environment: str = "development",
    ) -> None:
        self._dispatcher = dispatcher
        self._registry = registry
        self._counters = counters
        self.scheduler = scheduler
        self.environment = environment

    @classmethod
    def from_config(
        cls,
        service_config: ServiceConfig,
        email_config: EmailProviderConfig,
        sms_config: SmsProviderConfig,
        liveness_config: LivenessConfig,
    ) -> Self:
        registry = create_default_registry(email_config, sms_config)
        counters = LivenessCounters()
        scheduler = LivenessScheduler(
            LivenessPolicy.from_config(liveness_config, service_config),
            counters,
            HttpSelfCheck(liveness_config.self_check_url, liveness_config.timeout_seconds),
        )
        return cls(
            dispatcher=Dispatcher(registry, TemplateRenderer()),
            registry=registry,
            counters=counters,
            scheduler=scheduler,
            environment=service_config.environment,
        )

    def submit_notification(
        self,
        channel: Channel | str,
        kind: NotificationKind | str,
        fields: Mapping[str, Any],
    ) -> DispatchResult:
        """Build a request from loose *fields* and dispatch it.

        Raises a DispatchFailure subclass on any failure.
        """
        try:
            request = NotificationRequest.model_validate(
                {**fields, "channel": channel, "kind": kind}
            )
        except PydanticValidationError as exc:
            error = exc.errors(include_url=False)[0]
            field = ".".join(str(part) for part in error["loc"]) or "request"
            raise ValidationError(field, error["msg"]) from exc
        return self._dispatcher.dispatch(request)

    def query_liveness(self) -> LivenessSnapshot:
        return self._counters.snapshot()

    def provider_status(self) -> dict[str, dict[str, Any]]:
        return {
            str(channel): {
                "configured": self._registry.get(channel).is_configured,
                "provider": type(self._registry.get(channel)).__name__,
            }
            for channel in self._registry.channels()
        }

    def missing_configuration(self) -> list[str]:
        """Channels whose provider is missing credentials."""
        return [
            str(channel)
            for channel in self._registry.channels()
            if not self._registry.get(channel).is_configured
        ]

    def start_liveness(self) -> None:
        if self.scheduler is not None:
            self.scheduler.start()

    def stop_liveness(self) -> None:
        if self.scheduler is not None:
            self.scheduler.stop()
