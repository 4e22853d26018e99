import logging
import time
from typing import Any

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from revboost_notifier.errors import DispatchFailure
from revboost_notifier.log import setup_logging
from revboost_notifier.routes import bp
from revboost_notifier.service import NotificationService

logger = logging.getLogger(__name__)

_REDACTED_FIELDS = ("password", "token", "apiKey")


def create_app(service: NotificationService, log_level: str = "INFO") -> Flask:
    """Flask application factory.

    Args:
        service: Notification service (real, or built from mocks in tests).
        log_level: Root log level for the JSON logger.
    """
    setup_logging(log_level)

    app = Flask(__name__)
    app.extensions["notification_service"] = service

    app.register_blueprint(bp)
    app.before_request(_log_request)
    app.after_request(_log_response)
    app.register_error_handler(DispatchFailure, _handle_dispatch_failure)
    app.register_error_handler(404, _handle_not_found)
    app.register_error_handler(405, _handle_method_not_allowed)
    app.register_error_handler(Exception, _handle_unexpected)

    logger.info("Notifier initialized", extra={"environment": service.environment})
    return app


def _log_request() -> None:
    g.request_started = time.monotonic()
    logger.info(
        "Request received",
        extra={"method": request.method, "path": request.path, "remote_addr": request.remote_addr},
    )
    if request.method in ("POST", "PUT"):
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            logger.debug("Request body", extra={"body": _redact(body)})


def _log_response(response: Response) -> Response:
    started = g.get("request_started")
    duration_ms = round((time.monotonic() - started) * 1000) if started else None
    log_ctx = {
        "method": request.method,
        "path": request.path,
        "status_code": response.status_code,
        "duration_ms": duration_ms,
    }
    if response.status_code >= 400:
        logger.warning("Request completed with error", extra=log_ctx)
    else:
        logger.info("Request completed", extra=log_ctx)
    return response


def _handle_dispatch_failure(exc: DispatchFailure) -> tuple[Response, int]:
    log_ctx = {"path": request.path, "failure_kind": exc.kind, "detail": exc.message}
    if exc.http_status >= 500:
        logger.error("Dispatch failed", extra=log_ctx)
    else:
        logger.warning("Dispatch rejected", extra=log_ctx)
    return jsonify({"success": False, "error": exc.to_dict()}), exc.http_status


def _handle_not_found(_exc: Exception) -> tuple[Response, int]:
    return jsonify({
        "success": False,
        "error": "Endpoint not found",
        "message": f"{request.method} {request.path} not found",
    }), 404


def _handle_method_not_allowed(_exc: Exception) -> tuple[Response, int]:
    return jsonify({
        "success": False,
        "error": "Method not allowed",
        "message": f"{request.method} {request.path} is not supported",
    }), 405


def _handle_unexpected(exc: Exception) -> tuple[Response, int]:
    if isinstance(exc, HTTPException):
        return jsonify({"success": False, "error": exc.name}), exc.code or 500
    logger.exception("Unhandled error", extra={"path": request.path})
    return jsonify({"success": False, "error": "Internal server error"}), 500


def _redact(body: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "[REDACTED]" if key in _REDACTED_FIELDS else value
        for key, value in body.items()
    }
