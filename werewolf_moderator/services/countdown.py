"""Countdown timer for timed speeches and discussion.

The callback runs on a timer thread; it should call GameEngine methods,
which serialize on the engine lock.
"""
import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Pausable one-shot countdown built on threading.Timer."""

    def __init__(self, on_expire: Optional[Callable[[], None]] = None):
        self._on_expire = on_expire
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._duration = 0.0
        self._remaining = 0.0
        self._started_at: Optional[float] = None
        self._expired = False

    @property
    def running(self) -> bool:
        return self._timer is not None

    @property
    def expired(self) -> bool:
        return self._expired

    @property
    def remaining(self) -> float:
        """Seconds left, never negative."""
        with self._lock:
            if self._started_at is None:
                return self._remaining
            elapsed = time.monotonic() - self._started_at
            return max(0.0, self._remaining - elapsed)

    def start(self, duration: Optional[float] = None) -> None:
        """Start (or resume, when duration is omitted) the countdown."""
        with self._lock:
            self._cancel()
            if duration is not None:
                if duration < 0:
                    raise ValueError("duration must not be negative")
                self._duration = float(duration)
                self._remaining = float(duration)
                self._expired = False
            if self._expired or self._remaining <= 0:
                return
            self._started_at = time.monotonic()
            self._timer = threading.Timer(self._remaining, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def pause(self) -> None:
        with self._lock:
            if self._started_at is None:
                return
            elapsed = time.monotonic() - self._started_at
            self._remaining = max(0.0, self._remaining - elapsed)
            self._cancel()

    def reset(self) -> None:
        """Stop and restore the last duration without firing."""
        with self._lock:
            self._cancel()
            self._remaining = self._duration
            self._expired = False

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._started_at = None

    def _fire(self) -> None:
        with self._lock:
            if self._expired or threading.current_thread() is not self._timer:
                return
            self._expired = True
            self._remaining = 0.0
            self._started_at = None
            self._timer = None
        if self._on_expire is not None:
            try:
                self._on_expire()
            except Exception:
                logger.exception("Countdown callback failed")
