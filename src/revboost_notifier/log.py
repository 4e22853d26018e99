"""Single-line JSON logging for the notifier process."""

import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime, timezone

# LogRecord attributes that are not caller context; everything else on a
# record arrived through `extra={...}` and is copied into the JSON line.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    | {"message", "asctime"}
)

SERVICE_NAME = "revboost-notifier"
DEFAULT_SUPPRESSED = ("urllib3", "werkzeug", "schedule")


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    A ``recipient`` passed through ``extra`` is masked before it is written.
    """

    def __init__(self, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                entry[key] = value

        recipient = entry.get("recipient")
        if isinstance(recipient, str) and "***" not in recipient:
            entry["recipient"] = mask_recipient(recipient)

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    suppress: Sequence[str] = DEFAULT_SUPPRESSED,
) -> None:
    """Send the root logger to stdout through JsonFormatter.

    Args:
        level: Root log level name; unknown names fall back to INFO.
        suppress: Logger names raised to WARNING to keep HTTP client and
                  dev-server chatter out of the stream.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    for name in suppress:
        logging.getLogger(name).setLevel(logging.WARNING)


def mask_recipient(recipient: str) -> str:
    """Hide most of an address or phone number for log output."""
    if "@" in recipient:
        local, _, domain = recipient.partition("@")
        return f"{local[:1]}***@{domain}"
    if len(recipient) <= 4:
        return "***"
    return f"***{recipient[-4:]}"
