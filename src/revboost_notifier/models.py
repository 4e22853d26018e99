from dataclasses import dataclass
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

from revboost_notifier.enums import Channel, ContentType, NotificationKind

ANONYMOUS_CUSTOMER = "Anonymous Customer"


class NotificationRequest(BaseModel):
    """One request to notify a recipient on a single channel.

    Only types are enforced here. Cross-field rules (recipient format per
    channel, required fields per kind) live in ``validation``.
    """

    model_config = ConfigDict(frozen=True)

    channel: Channel
    kind: NotificationKind
    recipient: str
    customer_name: str | None = None
    business_name: str | None = None
    review_link: str | None = None
    reply_to: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)
    rating: int | None = None
    feedback: str | None = None
    business_id: str | None = None


@dataclass(frozen=True, slots=True)
class MessageFields:
    """Values the template renderer interpolates."""

    customer_name: str | None = None
    business_name: str | None = None
    review_link: str | None = None
    button_text: str | None = None
    message_template: str | None = None
    rating: int | None = None
    feedback: str | None = None

    @classmethod
    def from_request(cls, request: NotificationRequest) -> Self:
        custom = request.custom_data
        return cls(
            customer_name=request.customer_name,
            business_name=request.business_name,
            review_link=request.review_link,
            button_text=custom.get("buttonText") or None,
            message_template=custom.get("messageTemplate") or None,
            rating=request.rating,
            feedback=request.feedback,
        )


@dataclass(frozen=True, slots=True)
class RenderedMessage:
    body: str
    content_type: ContentType
    subject: str | None = None


@dataclass(frozen=True, slots=True)
class DispatchResult:
    provider_id: str
    provider_status: str
    channel: Channel
    kind: NotificationKind

    def to_dict(self) -> dict[str, str]:
        return {
            "providerId": self.provider_id,
            "providerStatus": self.provider_status,
            "channel": str(self.channel),
            "kind": str(self.kind),
        }
