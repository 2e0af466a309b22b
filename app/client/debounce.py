"""
Debounce
========

Timer-cancel-reschedule helpers for asyncio code: each new call cancels
the pending one and starts the delay again, so only the latest value is
delivered once input settles.
"""

import asyncio
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

DEFAULT_DELAY_SECONDS = 0.3


class Debouncer:
    """
    Delay ``callback`` until ``delay`` seconds pass without another call.

    Must be called from inside a running event loop.
    """

    def __init__(self, callback: Callable[..., None], delay: float = DEFAULT_DELAY_SECONDS):
        self.callback = callback
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args) -> None:
        self.cancel()
        self._args = args
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def _fire(self) -> None:
        self._handle = None
        args, self._args = self._args, ()
        self.callback(*args)


class DebouncedValue(Generic[T]):
    """
    A value plus a copy of it that only catches up after ``delay``.

    ``value`` changes immediately on ``set``; ``debounced`` changes once
    no further ``set`` has arrived for ``delay`` seconds.
    """

    def __init__(
        self,
        initial: T,
        delay: float = DEFAULT_DELAY_SECONDS,
        on_change: Optional[Callable[[T], None]] = None,
    ):
        self.value: T = initial
        self.debounced: T = initial
        self.on_change = on_change
        self._debouncer = Debouncer(self._settle, delay)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def set(self, value: T) -> None:
        self.value = value
        self._debouncer(value)

    def flush(self) -> None:
        self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()

    def _settle(self, value: T) -> None:
        changed = value != self.debounced
        self.debounced = value
        if changed and self.on_change is not None:
            self.on_change(value)
