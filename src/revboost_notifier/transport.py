"""Outbound HTTP with a deadline on the whole exchange.

``requests`` applies ``timeout`` to the connect and to each socket read, so a
peer that trickles its reply can hold a call open indefinitely. The helpers
here run the request on a worker thread and stop waiting once ``timeout``
seconds have passed since the call began, whatever stage the exchange is in.
"""

import json
import time
from collections.abc import Callable
from concurrent import futures
from dataclasses import dataclass
from typing import Any

import requests

_CHUNK_SIZE = 1024


class DeadlineExceeded(requests.Timeout):
    """No complete response arrived within the overall deadline."""


@dataclass(frozen=True, slots=True)
class BoundedResponse:
    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        """Decode the body; raises ValueError when it is not JSON."""
        return json.loads(self.content)


def post(url: str, *, timeout: float, **kwargs: Any) -> BoundedResponse:
    return _bounded(requests.post, url, timeout, kwargs)


def get(url: str, *, timeout: float, **kwargs: Any) -> BoundedResponse:
    return _bounded(requests.get, url, timeout, kwargs)


def _bounded(
    send: Callable[..., requests.Response],
    url: str,
    timeout: float,
    kwargs: dict[str, Any],
) -> BoundedResponse:
    deadline = time.monotonic() + timeout
    executor = futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="bounded-http")
    try:
        future = executor.submit(_fetch, send, url, timeout, deadline, kwargs)
        try:
            return future.result(timeout=timeout)
        except futures.TimeoutError as exc:
            raise DeadlineExceeded(f"No complete response within {timeout}s") from exc
    finally:
        executor.shutdown(wait=False)


def _fetch(
    send: Callable[..., requests.Response],
    url: str,
    timeout: float,
    deadline: float,
    kwargs: dict[str, Any],
) -> BoundedResponse:
    response = send(url, timeout=timeout, stream=True, **kwargs)
    try:
        chunks: list[bytes] = []
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise DeadlineExceeded(f"No complete response within {timeout}s")
            chunks.append(chunk)
        return BoundedResponse(status_code=response.status_code, content=b"".join(chunks))
    finally:
        response.close()
