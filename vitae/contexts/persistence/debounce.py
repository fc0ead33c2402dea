"""
Single-slot debounced call scheduler.

A Debouncer holds at most one pending call. Each schedule() cancels the pending
call (if any) and starts a new countdown, so a burst of N schedules within the
delay window results in exactly one call, made with the arguments of the last
schedule.

Usage:
    writer = Debouncer(delay=1.0, action=persistence.save)
    writer.schedule(snapshot_1)
    writer.schedule(snapshot_2)   # replaces snapshot_1
    # ~1s later: persistence.save(snapshot_2)

Pending calls run on the timer's thread. Timers are daemonic: if the process
exits before a pending call fires, the call is abandoned.
"""

import threading
from typing import Any, Callable, Optional, Tuple

TimerFactory = Callable[..., Any]


class Debouncer:
    """
    Coalesces bursts of calls into one deferred call.

    Args:
        delay: Quiet period in seconds before the pending call runs
        action: Callable invoked with the arguments of the most recent schedule()
        timer_factory: threading.Timer-compatible factory (interval, function, args=...)
    """

    def __init__(
        self,
        delay: float,
        action: Callable[..., None],
        timer_factory: TimerFactory = threading.Timer,
    ):
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")

        self.delay = delay
        self.action = action
        self.timer_factory = timer_factory

        self._lock = threading.Lock()
        self._timer = None
        self._args: Optional[Tuple[Any, ...]] = None
        # Incremented on every schedule/flush/cancel so a timer that fires after
        # being superseded can recognise itself as stale
        self._generation = 0

    @property
    def pending(self) -> bool:
        """Whether a call is waiting to run."""
        with self._lock:
            return self._timer is not None

    def schedule(self, *args: Any) -> None:
        """Replace any pending call with a new one, due `delay` seconds from now."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._args = args
            timer = self.timer_factory(self.delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def flush(self) -> bool:
        """
        Run the pending call immediately.

        Returns:
            True if a pending call ran, False if nothing was pending
        """
        args = self._take_pending()
        if args is None:
            return False
        self.action(*args)
        return True

    def cancel(self) -> bool:
        """
        Drop the pending call without running it.

        Returns:
            True if a pending call was dropped
        """
        return self._take_pending() is not None

    def _take_pending(self) -> Optional[Tuple[Any, ...]]:
        with self._lock:
            if self._timer is None:
                return None
            self._timer.cancel()
            args = self._args
            self._timer = None
            self._args = None
            self._generation += 1
        return args

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._timer is None:
                return
            args = self._args
            self._timer = None
            self._args = None
        self.action(*args)
