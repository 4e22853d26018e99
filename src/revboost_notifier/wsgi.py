"""WSGI entry point for gunicorn.

Usage:
    gunicorn revboost_notifier.wsgi:app --bind 0.0.0.0:3000
"""
import atexit

from revboost_notifier.app import create_app
from revboost_notifier.config import (
    EmailProviderConfig,
    LivenessConfig,
    ServiceConfig,
    SmsProviderConfig,
)
from revboost_notifier.service import NotificationService

_config = ServiceConfig()
_service = NotificationService.from_config(
    _config, EmailProviderConfig(), SmsProviderConfig(), LivenessConfig()
)
app = create_app(_service, log_level=_config.log_level)

_service.start_liveness()
atexit.register(_service.stop_liveness)
