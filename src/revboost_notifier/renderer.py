"""Channel-specific message rendering.

Email bodies are Jinja2 templates whose every interpolated value goes through
``sanitizer.escape`` (via the environment's ``finalize`` hook); autoescape is
left off so escaping happens in exactly one place. SMS bodies are plain text
built by literal placeholder substitution.
"""

import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from jinja2 import StrictUndefined, Template
from jinja2.sandbox import SandboxedEnvironment

from revboost_notifier.enums import Channel, ContentType, NotificationKind
from revboost_notifier.errors import ValidationError
from revboost_notifier.models import ANONYMOUS_CUSTOMER, MessageFields, RenderedMessage
from revboost_notifier.sanitizer import escape
from revboost_notifier.templates import (
    DEFAULT_BUTTON_TEXT,
    DEFAULT_SMS_REVIEW_REQUEST,
    EMAIL_BODIES,
    EMAIL_SUBJECTS,
    SMS_TEST_BODY,
)

Clock = Callable[[], datetime]

_PLACEHOLDER_RE = re.compile(r"\{\{(customerName|businessName|reviewLink)\}\}")

_REVIEW_FIELDS = ("customer_name", "business_name", "review_link")

# (kind, channel) pairs that can be rendered, with the fields each requires.
REQUIRED_FIELDS: dict[tuple[NotificationKind, Channel], tuple[str, ...]] = {
    (NotificationKind.REVIEW_REQUEST, Channel.EMAIL): _REVIEW_FIELDS,
    (NotificationKind.REVIEW_REQUEST, Channel.SMS): _REVIEW_FIELDS,
    (NotificationKind.TEST, Channel.EMAIL): (),
    (NotificationKind.TEST, Channel.SMS): (),
    (NotificationKind.FEEDBACK_ALERT, Channel.EMAIL): (
        "business_name",
        "rating",
        "feedback",
    ),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _finalize(value: Any) -> str:
    return escape(str(value))


def star_rating(rating: int) -> str:
    """Five glyphs, ``rating`` of them filled. Expects 1-5."""
    return "★" * rating + "☆" * (5 - rating)


def substitute_placeholders(
    template: str,
    *,
    customer_name: str,
    business_name: str,
    review_link: str,
) -> str:
    """Replace the three recognized ``{{name}}`` placeholders.

    Substitution is a single pass, so placeholder text inside a substituted
    value is not expanded again. Unrecognized placeholders are kept verbatim.
    """
    values = {
        "customerName": customer_name,
        "businessName": business_name,
        "reviewLink": review_link,
    }
    return _PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], template)


class TemplateRenderer:
    """Turns (kind, channel, fields) into a RenderedMessage."""

    def __init__(self, clock: Clock = _utcnow) -> None:
        self._clock = clock
        self._env = SandboxedEnvironment(
            autoescape=False,
            undefined=StrictUndefined,
            finalize=_finalize,
            keep_trailing_newline=True,
        )
        self._email_templates: dict[NotificationKind, Template] = {
            kind: self._env.from_string(source) for kind, source in EMAIL_BODIES.items()
        }

    def render(
        self,
        kind: NotificationKind,
        channel: Channel,
        fields: MessageFields,
    ) -> RenderedMessage:
        """Render one message.

        Raises ValidationError when the (kind, channel) pair is not supported
        or a field it requires is missing.
        """
        required = REQUIRED_FIELDS.get((kind, channel))
        if required is None:
            raise ValidationError(
                "channel", f"{kind} notifications cannot be sent by {channel}"
            )
        for name in required:
            value = getattr(fields, name)
            if value is None or value == "":
                raise ValidationError(name, "is required")

        if channel == Channel.EMAIL:
            return self._render_email(kind, fields)
        return self._render_sms(kind, fields)

    def _render_email(self, kind: NotificationKind, fields: MessageFields) -> RenderedMessage:
        now = self._clock()
        context = {
            "customer_name": fields.customer_name or ANONYMOUS_CUSTOMER,
            "business_name": fields.business_name or "",
            "review_link": fields.review_link or "",
            "button_text": fields.button_text or DEFAULT_BUTTON_TEXT,
            "feedback": fields.feedback or "",
            "rating": fields.rating or 0,
            "stars": star_rating(fields.rating) if fields.rating else "",
            "year": now.year,
            "sent_at": now.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        }
        body = self._email_templates[kind].render(context)
        subject = EMAIL_SUBJECTS[kind].format(business_name=fields.business_name or "")
        return RenderedMessage(body=body, content_type=ContentType.HTML, subject=subject)

    def _render_sms(self, kind: NotificationKind, fields: MessageFields) -> RenderedMessage:
        if kind == NotificationKind.TEST:
            return RenderedMessage(body=SMS_TEST_BODY, content_type=ContentType.TEXT)

        body = substitute_placeholders(
            fields.message_template or DEFAULT_SMS_REVIEW_REQUEST,
            customer_name=fields.customer_name or "",
            business_name=fields.business_name or "",
            review_link=fields.review_link or "",
        )
        return RenderedMessage(body=body, content_type=ContentType.TEXT)
