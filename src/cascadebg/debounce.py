"""
Debounce Gate
Coalesces bursts of trigger events into a single delayed call.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Optional

from cascadebg.exceptions import ConfigError


class Debouncer:
    """
    Time-gated gate: fires `callback` once, with the most recent arguments,
    after triggers have been quiet for `delay` seconds.

    It owns no timer. The host decides when to `poll()` (typically from a
    single-shot QTimer with the same interval), which keeps it testable with
    an injected clock.
    """
    def __init__(
        self,
        delay: float,
        callback: Callable[..., Any],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay < 0:
            raise ConfigError(f"delay must not be negative, got {delay}")
        self.delay = delay
        self._callback = callback
        self._clock = clock
        self._deadline: Optional[float] = None
        self._args: tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def remaining(self) -> float:
        """Seconds left until the pending call may fire (0 when nothing is pending)."""
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self._clock())

    def trigger(self, *args: Any) -> None:
        self._args = args
        self._deadline = self._clock() + self.delay

    def poll(self) -> bool:
        """Fire the callback if the burst has quiesced. Returns True if it fired."""
        if self._deadline is None or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Fire a pending call right now, ignoring the deadline."""
        if self._deadline is None:
            return False
        args = self._args
        self.cancel()
        self._callback(*args)
        return True

    def cancel(self) -> None:
        self._deadline = None
        self._args = ()
