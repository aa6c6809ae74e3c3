"""
Owned handle for a single delayed warm fire.
"""

import asyncio
from typing import Callable, Optional


class PendingFire:
    """
    Wraps `loop.call_later` so the scheduler holds an explicit, cancellable
    reference instead of a bare timer id.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.delay = delay
        self._callback = callback
        self._loop = loop or asyncio.get_running_loop()
        self._fired = False
        self._handle = self._loop.call_later(delay, self._fire)

    @property
    def when(self) -> float:
        """Loop time at which the fire is due."""
        return self._handle.when()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def active(self) -> bool:
        return not (self._fired or self._handle.cancelled())

    def cancel(self) -> None:
        """Cancel the fire; no-op if it already ran or was cancelled."""
        if self.active:
            self._handle.cancel()

    def _fire(self) -> None:
        self._fired = True
        self._callback()
