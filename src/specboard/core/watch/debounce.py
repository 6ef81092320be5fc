"""
Single-slot debounce timer on the running event loop.
"""

import asyncio
from collections.abc import Callable


class DebounceTimer:
    """
    Fire a callback once a quiet period has elapsed.

    Every reset() cancels the pending call and re-arms the timer, so a
    burst of resets produces exactly one callback, ``delay`` seconds after
    the last reset. Must be used from inside a running event loop.

    Example:
        >>> timer = DebounceTimer(0.3, lambda: print("fired"))
        >>> timer.reset()
        >>> timer.reset()   # only this one fires
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """True while a callback is armed and has not fired."""
        return self._handle is not None

    def reset(self) -> None:
        """Cancel any pending call and arm the timer again."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Release the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
