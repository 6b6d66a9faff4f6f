"""Debounced autosave scheduling.

A Debouncer delays a callback until a quiet period has elapsed since the
last schedule() call. Rescheduling cancels the pending timer and arms a
new one holding the latest payload; flush() runs the pending payload
immediately on the caller's thread.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]


class Debouncer:
    """Cancelable scheduled task holding the last payload.

    Example:
        >>> debouncer = Debouncer(2.0, lambda payload: api.update_page("about", **payload))
        >>> debouncer.schedule({"content": {"title": "About"}})
        >>> debouncer.schedule({"content": {"title": "About Us"}})  # restarts the wait
        >>> debouncer.flush()  # saves "About Us" now
    """

    def __init__(
        self,
        delay_seconds: float,
        callback: Callable[[Any], Any],
        timer_factory: TimerFactory = threading.Timer,
    ):
        """Initialize the debouncer.

        Args:
            delay_seconds: Quiet period before the callback fires
            callback: Called with the latest scheduled payload
            timer_factory: Builds a timer from (interval, function); must
                provide start() and cancel(). Tests inject a manual timer.
        """
        if delay_seconds < 0:
            raise ValueError("delay_seconds cannot be negative")

        self.delay_seconds = delay_seconds
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[Any] = None
        self._payload: Any = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self, payload: Any = None) -> None:
        """Arm (or re-arm) the timer with payload, replacing any pending one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._payload = payload
            timer = self._timer_factory(self.delay_seconds, lambda: self._fire(generation))
            if hasattr(timer, 'daemon'):
                timer.daemon = True
            self._timer = timer
            timer.start()

    def _take(self, generation: Optional[int] = None):
        with self._lock:
            if self._timer is None:
                return False, None
            if generation is not None and generation != self._generation:
                return False, None
            self._timer.cancel()
            self._timer = None
            payload, self._payload = self._payload, None
            return True, payload

    def _fire(self, generation: int) -> None:
        # A timer cancelled after it started waiting can still call in
        ready, payload = self._take(generation)
        if not ready:
            return
        try:
            self._callback(payload)
        except Exception as e:
            logger.error(f"Scheduled save failed: {e}")

    def flush(self) -> Any:
        """Cancel the timer and run the callback now with the pending payload.

        Returns:
            The callback's result, or None when nothing was pending

        Raises:
            Exception: Whatever the callback raises
        """
        ready, payload = self._take()
        if not ready:
            return None
        return self._callback(payload)

    def cancel(self) -> None:
        """Drop the pending timer and payload without running the callback."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._payload = None
            self._generation += 1
