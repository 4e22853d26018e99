from enum import StrEnum


class Channel(StrEnum):
    EMAIL = "email"
    SMS = "sms"


class NotificationKind(StrEnum):
    REVIEW_REQUEST = "review_request"
    TEST = "test"
    FEEDBACK_ALERT = "feedback_alert"


class ContentType(StrEnum):
    HTML = "html"
    TEXT = "text"
