"""Self-ping liveness scheduler.

Keeps the process warm on hosts that idle out inactive services by calling
the service's own ``/health`` endpoint on a fixed cadence, independent of
request traffic. Outcomes are only recorded in ``LivenessCounters``; a failed
tick is logged and never propagates.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Self

import schedule

from revboost_notifier import transport
from revboost_notifier.config import LivenessConfig, ServiceConfig

logger = logging.getLogger(__name__)

SELF_CHECK_TIMEOUT_SECONDS = 30.0
_POLL_SECONDS = 1.0

Clock = Callable[[], datetime]
Check = Callable[[], bool]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class LivenessSnapshot:
    total_attempts: int
    success_count: int
    failure_count: int
    last_attempt_at: datetime | None
    started_at: datetime
    uptime_seconds: int

    @property
    def success_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return round(self.success_count / self.total_attempts * 100, 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAttempts": self.total_attempts,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "lastAttemptAt": self.last_attempt_at.isoformat() if self.last_attempt_at else None,
            "startedAt": self.started_at.isoformat(),
            "uptime": self.uptime_seconds,
            "successRate": self.success_rate,
        }


class LivenessCounters:
    """Thread-safe attempt counters shared by the scheduler and diagnostics."""

    def __init__(self, clock: Clock = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._total = 0
        self._success = 0
        self._failure = 0
        self._last_attempt_at: datetime | None = None
        self._started_at = clock()

    def record(self, success: bool) -> None:
        """Count one attempt and exactly one of success or failure."""
        now = self._clock()
        with self._lock:
            self._total += 1
            if success:
                self._success += 1
            else:
                self._failure += 1
            self._last_attempt_at = now

    def snapshot(self) -> LivenessSnapshot:
        now = self._clock()
        with self._lock:
            return LivenessSnapshot(
                total_attempts=self._total,
                success_count=self._success,
                failure_count=self._failure,
                last_attempt_at=self._last_attempt_at,
                started_at=self._started_at,
                uptime_seconds=int((now - self._started_at).total_seconds()),
            )


@dataclass(frozen=True, slots=True)
class LivenessPolicy:
    enabled: bool
    interval_seconds: int = 14 * 60
    initial_delay_seconds: float = 5.0

    @classmethod
    def from_config(cls, liveness: LivenessConfig, service: ServiceConfig) -> Self:
        """Evaluate once at startup; the scheduler only runs in production."""
        return cls(
            enabled=service.is_production,
            interval_seconds=liveness.interval_seconds,
            initial_delay_seconds=liveness.initial_delay_seconds,
        )


class HttpSelfCheck:
    """GET ``{base_url}/health``; healthy only on HTTP 200 within ``timeout``."""

    def __init__(self, base_url: str, timeout: float = SELF_CHECK_TIMEOUT_SECONDS) -> None:
        self.url = f"{base_url.rstrip('/')}/health"
        self._timeout = timeout

    def __call__(self) -> bool:
        response = transport.get(
            self.url,
            timeout=self._timeout,
            headers={"User-Agent": "KeepAlive/1.0", "X-Keep-Alive": "true"},
        )
        return response.status_code == 200


class SchedulerState(StrEnum):
    STOPPED = "stopped"
    RUNNING = "running"


class LivenessScheduler:
    """Runs ``check`` every ``policy.interval_seconds`` on a daemon thread.

    A one-shot warm-up check fires ``policy.initial_delay_seconds`` after
    ``start`` so a fresh deployment does not wait a full interval.
    """

    def __init__(
        self,
        policy: LivenessPolicy,
        counters: LivenessCounters,
        check: Check,
    ) -> None:
        self.policy = policy
        self._counters = counters
        self._check = check
        self._scheduler = schedule.Scheduler()
        self._stop = threading.Event()
        self._state_lock = threading.Lock()
        self._state = SchedulerState.STOPPED
        self._thread: threading.Thread | None = None
        self._warmup: threading.Timer | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    def start(self) -> None:
        """Start the timer. Calling it again while running does nothing."""
        if not self.policy.enabled:
            logger.info("Keep-alive disabled (not in production)")
            return

        with self._state_lock:
            if self._state == SchedulerState.RUNNING:
                return
            self._state = SchedulerState.RUNNING
            # Fresh event per run; an older polling thread keeps its own, already set.
            self._stop = threading.Event()

            self._scheduler.every(self.policy.interval_seconds).seconds.do(self.tick)

            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name="liveness-scheduler", daemon=True
            )
            self._thread.start()

            self._warmup = threading.Timer(self.policy.initial_delay_seconds, self.tick)
            self._warmup.daemon = True
            self._warmup.start()

        logger.info(
            "Keep-alive started",
            extra={
                "interval_seconds": self.policy.interval_seconds,
                "initial_delay_seconds": self.policy.initial_delay_seconds,
            },
        )

    def stop(self) -> None:
        with self._state_lock:
            if self._state == SchedulerState.STOPPED:
                return
            self._stop.set()
            if self._warmup is not None:
                self._warmup.cancel()
            self._scheduler.clear()
            thread, self._thread = self._thread, None
            self._state = SchedulerState.STOPPED
        if thread is not None and thread is not threading.current_thread():
            thread.join(_POLL_SECONDS * 2)
        logger.info("Keep-alive stopped")

    def tick(self) -> bool:
        """Run one self-check and record the outcome. Never raises."""
        try:
            healthy = bool(self._check())
        except Exception as exc:
            logger.warning("Self-ping failed", extra={"error": str(exc)})
            healthy = False
        else:
            if not healthy:
                logger.warning("Self-ping returned an unhealthy response")

        self._counters.record(healthy)
        snapshot = self._counters.snapshot()
        logger.info(
            "Self-ping recorded",
            extra={
                "healthy": healthy,
                "success_count": snapshot.success_count,
                "total_attempts": snapshot.total_attempts,
            },
        )
        return healthy

    def _run(self, stop: threading.Event) -> None:
        while not stop.is_set():
            self._scheduler.run_pending()
            stop.wait(_POLL_SECONDS)
