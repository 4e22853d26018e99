"""Structural checks run before any rendering or provider call."""

import re
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from revboost_notifier.enums import Channel, NotificationKind
from revboost_notifier.errors import ValidationError
from revboost_notifier.models import NotificationRequest
from revboost_notifier.renderer import REQUIRED_FIELDS

# Optional leading +, then 8-15 digits once common separators are removed.
_PHONE_RE = re.compile(r"^\+?[1-9]\d{7,14}$")
_PHONE_SEPARATORS = re.compile(r"[\s().-]")

_ALLOWED_SCHEMES = frozenset({"http", "https"})

_STRING_OVERRIDES = ("buttonText", "messageTemplate")

MIN_RATING = 1
MAX_RATING = 5


def is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_phone_number(value: str) -> bool:
    return bool(_PHONE_RE.match(_PHONE_SEPARATORS.sub("", value)))


def is_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in _ALLOWED_SCHEMES and bool(parts.netloc)


def validate_request(request: NotificationRequest) -> None:
    """Raise ValidationError for the first problem found in *request*."""
    _check_recipient(request)

    required = REQUIRED_FIELDS.get((request.kind, request.channel))
    if required is None:
        raise ValidationError(
            "channel",
            f"{request.kind} notifications cannot be sent by {request.channel}",
        )
    for name in required:
        value = getattr(request, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(name, "is required")

    if request.kind == NotificationKind.FEEDBACK_ALERT:
        _check_rating(request.rating)

    if request.review_link is not None and request.kind != NotificationKind.TEST:
        if not is_http_url(request.review_link):
            raise ValidationError("review_link", "must be an absolute http or https URL")

    if request.reply_to is not None:
        if request.channel != Channel.EMAIL:
            raise ValidationError("reply_to", "is only supported for email")
        if not is_email(request.reply_to):
            raise ValidationError("reply_to", "must be a valid email address")

    for key in _STRING_OVERRIDES:
        value = request.custom_data.get(key)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"custom_data.{key}", "must be a string")


def _check_recipient(request: NotificationRequest) -> None:
    recipient = request.recipient.strip()
    if not recipient:
        raise ValidationError("recipient", "is required")
    if request.channel == Channel.EMAIL and not is_email(recipient):
        raise ValidationError("recipient", "must be a valid email address")
    if request.channel == Channel.SMS and not is_phone_number(recipient):
        raise ValidationError("recipient", "must be a valid phone number")


def _check_rating(rating: int | None) -> None:
    if rating is None:
        raise ValidationError("rating", "is required")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            "rating", f"must be between {MIN_RATING} and {MAX_RATING}"
        )
