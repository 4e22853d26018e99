import logging
import os
import platform
import resource
import time
from datetime import datetime, timezone
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from revboost_notifier.enums import Channel, NotificationKind
from revboost_notifier.errors import ValidationError
from revboost_notifier.models import DispatchResult
from revboost_notifier.service import NotificationService

logger = logging.getLogger(__name__)

bp = Blueprint("notifier", __name__)

_PROCESS_STARTED = time.monotonic()

ENDPOINTS = {
    "health": "/health",
    "liveHealth": "/health/live",
    "readyHealth": "/health/ready",
    "detailedHealth": "/health/detailed",
    "emailReviewRequest": "/api/email/review-request",
    "emailTest": "/api/email/test",
    "feedbackNotification": "/api/email/feedback-notification",
    "smsReviewRequest": "/api/sms/review-request",
    "smsTest": "/api/sms/test",
}


def _service() -> NotificationService:
    return current_app.extensions["notification_service"]


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("body", "Request body must be a JSON object")
    return body


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uptime() -> float:
    return round(time.monotonic() - _PROCESS_STARTED, 3)


def format_uptime(seconds: float) -> str:
    """Render seconds as e.g. ``1d 2h 5s``; zero units are skipped."""
    total = int(seconds)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = [f"{value}{unit}" for value, unit in ((days, "d"), (hours, "h"), (minutes, "m")) if value]
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def _memory() -> dict[str, str]:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is reported in kilobytes on Linux.
    return {"maxRss": f"{round(usage.ru_maxrss / 1024)}MB"}


def _sent(result: DispatchResult, message: str) -> tuple[Response, int]:
    return jsonify({"success": True, "message": message, "data": result.to_dict()}), 200


@bp.post("/api/email/review-request")
def email_review_request() -> tuple[Response, int]:
    body = _json_body()
    result = _service().submit_notification(
        Channel.EMAIL,
        NotificationKind.REVIEW_REQUEST,
        {
            "recipient": body.get("toEmail") or "",
            "customer_name": body.get("customerName"),
            "business_name": body.get("businessName"),
            "review_link": body.get("reviewLink"),
            "reply_to": body.get("replyTo"),
            "custom_data": body.get("customData") or {},
        },
    )
    return _sent(result, "Email sent successfully")


@bp.post("/api/email/test")
def email_test() -> tuple[Response, int]:
    body = _json_body()
    result = _service().submit_notification(
        Channel.EMAIL,
        NotificationKind.TEST,
        {"recipient": body.get("toEmail") or ""},
    )
    return _sent(result, "Test email sent successfully")


@bp.post("/api/email/feedback-notification")
def email_feedback_notification() -> tuple[Response, int]:
    body = _json_body()
    result = _service().submit_notification(
        Channel.EMAIL,
        NotificationKind.FEEDBACK_ALERT,
        {
            "recipient": body.get("toEmail") or "",
            "business_id": body.get("businessId"),
            "business_name": body.get("businessName"),
            "rating": body.get("rating"),
            "feedback": body.get("feedback"),
            "customer_name": body.get("customerName"),
            "review_link": body.get("reviewLink"),
        },
    )
    return _sent(result, "Feedback notification sent successfully")


@bp.post("/api/sms/review-request")
def sms_review_request() -> tuple[Response, int]:
    body = _json_body()
    result = _service().submit_notification(
        Channel.SMS,
        NotificationKind.REVIEW_REQUEST,
        {
            "recipient": body.get("phoneNumber") or "",
            "customer_name": body.get("customerName"),
            "business_name": body.get("businessName"),
            "review_link": body.get("reviewLink"),
            "custom_data": body.get("customData") or {},
        },
    )
    return _sent(result, "SMS sent successfully")


@bp.post("/api/sms/test")
def sms_test() -> tuple[Response, int]:
    body = _json_body()
    result = _service().submit_notification(
        Channel.SMS,
        NotificationKind.TEST,
        {"recipient": body.get("phoneNumber") or ""},
    )
    return _sent(result, "Test SMS sent successfully")


@bp.get("/health")
def health() -> tuple[Response, int]:
    if request.headers.get("X-Keep-Alive") == "true":
        logger.info("Keep-alive health check received")

    return jsonify({
        "status": "ok",
        "timestamp": _now(),
        "uptime": _uptime(),
        "service": "revboost-notifier",
        "keepAlive": _service().query_liveness().to_dict(),
    }), 200


@bp.get("/health/live")
def health_live() -> tuple[Response, int]:
    return jsonify({"status": "alive", "timestamp": _now(), "uptime": _uptime()}), 200


@bp.get("/health/ready")
def health_ready() -> tuple[Response, int]:
    missing = _service().missing_configuration()
    if Channel.EMAIL in missing:
        return jsonify({
            "status": "not_ready",
            "timestamp": _now(),
            "error": "Email provider is not configured",
            "missing": missing,
        }), 503

    return jsonify({
        "status": "ready",
        "timestamp": _now(),
        "message": "Service is ready to handle requests",
    }), 200


@bp.get("/health/detailed")
def health_detailed() -> tuple[Response, int]:
    service = _service()
    scheduler = service.scheduler
    return jsonify({
        "status": "ok",
        "timestamp": _now(),
        "server": {
            "uptime": _uptime(),
            "uptimeFormatted": format_uptime(_uptime()),
            "pythonVersion": platform.python_version(),
            "platform": platform.system().lower(),
            "environment": service.environment,
            "pid": os.getpid(),
        },
        "memory": _memory(),
        "services": service.provider_status(),
        "keepAlive": {
            "enabled": scheduler.policy.enabled if scheduler else False,
            "state": str(scheduler.state) if scheduler else "stopped",
            **service.query_liveness().to_dict(),
        },
        "endpoints": ENDPOINTS,
    }), 200


@bp.get("/")
def index() -> tuple[Response, int]:
    return jsonify({
        "message": "Email & SMS notifier is running",
        "status": "active",
        "uptime": _uptime(),
        "endpoints": sorted(ENDPOINTS.values()),
    }), 200
