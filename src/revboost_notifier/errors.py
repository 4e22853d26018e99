"""Classified dispatch failures.

Every failure a caller can observe is one of the subclasses below. Raw
transport exceptions are translated at the provider boundary and never reach
callers directly.
"""

from typing import Any, ClassVar


class DispatchFailure(Exception):
    """Base class for all dispatch outcomes other than success."""

    kind: ClassVar[str] = "dispatch_failure"
    http_status: ClassVar[int] = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Caller-safe representation of the failure."""
        return {"kind": self.kind, "message": self.message}


class ValidationError(DispatchFailure):
    """Caller input is malformed; fix the input and resubmit."""

    kind = "validation_error"
    http_status = 400

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field, "reason": self.reason}


class ProviderUnconfigured(DispatchFailure):
    """The channel's provider credentials are missing."""

    kind = "provider_unconfigured"
    http_status = 503

    def __init__(self, channel: str) -> None:
        super().__init__(f"{channel} provider is not configured")
        self.channel = channel

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "channel": self.channel}


class ProviderRejected(DispatchFailure):
    """The provider answered with a non-2xx status."""

    kind = "provider_rejected"
    http_status = 502

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "status_code": self.status_code}


class ProviderUnreachable(DispatchFailure):
    """No response from the provider before the timeout. Safe to retry."""

    kind = "provider_unreachable"
    http_status = 504

    def __init__(self, cause: str) -> None:
        super().__init__("No response from delivery provider")
        self.cause = cause


class InternalError(DispatchFailure):
    """Unexpected failure. Details are logged, never returned."""

    kind = "internal_error"
    http_status = 500

    def __init__(self, cause: str) -> None:
        super().__init__("Internal server error")
        self.cause = cause
