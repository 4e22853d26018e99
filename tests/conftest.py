"""Shared fixtures: frozen clock, provider doubles, dispatcher and Flask app."""

import threading
import time
from collections.abc import Callable, Generator
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock

import pytest
from flask import Flask
from flask.testing import FlaskClient

from revboost_notifier.app import create_app
from revboost_notifier.dispatcher import Dispatcher
from revboost_notifier.enums import Channel
from revboost_notifier.liveness import LivenessCounters
from revboost_notifier.providers import ProviderRegistry
from revboost_notifier.providers.base import ProviderAck, ProviderClient
from revboost_notifier.renderer import TemplateRenderer
from revboost_notifier.service import NotificationService

FROZEN_NOW = datetime(2025, 3, 14, 9, 26, 53, tzinfo=timezone.utc)

TRICKLE_BODY = b'{"id": "em_slow", "sid": "SM_slow"}'
TRICKLE_DELAY_SECONDS = 0.1


def _make_client(channel: Channel, ack: ProviderAck) -> MagicMock:
    client = MagicMock(spec=ProviderClient)
    client.channel = channel
    client.is_configured = True
    client.send.return_value = ack
    return client


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    return lambda: FROZEN_NOW


@pytest.fixture()
def renderer(clock: Callable[[], datetime]) -> TemplateRenderer:
    return TemplateRenderer(clock=clock)


@pytest.fixture()
def email_client() -> MagicMock:
    return _make_client(Channel.EMAIL, ProviderAck(provider_id="x1", status="queued"))


@pytest.fixture()
def sms_client() -> MagicMock:
    return _make_client(Channel.SMS, ProviderAck(provider_id="SM123", status="queued"))


@pytest.fixture()
def registry(email_client: MagicMock, sms_client: MagicMock) -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(Channel.EMAIL, email_client)
    registry.register(Channel.SMS, sms_client)
    return registry


@pytest.fixture()
def dispatcher(registry: ProviderRegistry, renderer: TemplateRenderer) -> Dispatcher:
    return Dispatcher(registry, renderer)


@pytest.fixture()
def counters(clock: Callable[[], datetime]) -> LivenessCounters:
    return LivenessCounters(clock=clock)


@pytest.fixture()
def service(
    dispatcher: Dispatcher,
    registry: ProviderRegistry,
    counters: LivenessCounters,
) -> NotificationService:
    return NotificationService(dispatcher, registry, counters)


@pytest.fixture()
def app(service: NotificationService) -> Flask:
    app = create_app(service)
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


class _TricklingHandler(BaseHTTPRequestHandler):
    """Answers 200 promptly, then sends the body one byte at a time."""

    def _trickle(self) -> None:
        self.rfile.read(int(self.headers.get("Content-Length") or 0))
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(TRICKLE_BODY)))
        self.end_headers()
        try:
            for index in range(len(TRICKLE_BODY)):
                self.wfile.write(TRICKLE_BODY[index:index + 1])
                self.wfile.flush()
                time.sleep(TRICKLE_DELAY_SECONDS)
        except (BrokenPipeError, ConnectionResetError):
            pass

    do_GET = _trickle
    do_POST = _trickle

    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture()
def trickling_server() -> Generator[str, None, None]:
    """Base URL of a local server whose replies take several seconds to finish."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _TricklingHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    server.server_close()
