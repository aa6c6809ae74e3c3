"""
Lifecycle callbacks fired by the warming scheduler.
"""

from typing import Callable, Optional
from loguru import logger


class WarmingHooks:
    """
    Capability object receiving warm cycle notifications.

    Subclass and override whichever hooks you care about; the defaults do
    nothing. Hooks are called synchronously from the event loop and their
    return values are ignored.
    """

    def on_warming_start(self) -> None:
        pass

    def on_warming_complete(self) -> None:
        pass

    def on_warming_error(self, error: Exception) -> None:
        pass


class CallbackHooks(WarmingHooks):
    """
    Adapter turning plain callables into a hooks object.

    Callbacks left unset fall through to `fallback` (if given).

    Example:
        >>> hooks = CallbackHooks(on_warming_error=lambda exc: print(exc))
    """

    def __init__(
        self,
        on_warming_start: Optional[Callable[[], None]] = None,
        on_warming_complete: Optional[Callable[[], None]] = None,
        on_warming_error: Optional[Callable[[Exception], None]] = None,
        fallback: Optional[WarmingHooks] = None,
    ):
        self._on_start = on_warming_start
        self._on_complete = on_warming_complete
        self._on_error = on_warming_error
        self._fallback = fallback or WarmingHooks()

    def replace(self, **callbacks) -> "CallbackHooks":
        """
        Return a copy with the given callbacks swapped in.
        """
        return CallbackHooks(
            on_warming_start=callbacks.get("on_warming_start", self._on_start),
            on_warming_complete=callbacks.get("on_warming_complete", self._on_complete),
            on_warming_error=callbacks.get("on_warming_error", self._on_error),
            fallback=self._fallback,
        )

    def on_warming_start(self) -> None:
        if self._on_start:
            self._on_start()
        else:
            self._fallback.on_warming_start()

    def on_warming_complete(self) -> None:
        if self._on_complete:
            self._on_complete()
        else:
            self._fallback.on_warming_complete()

    def on_warming_error(self, error: Exception) -> None:
        if self._on_error:
            self._on_error(error)
        else:
            self._fallback.on_warming_error(error)


def safe_call(hook: Callable, *args) -> None:
    """
    Invoke a hook, logging (not propagating) anything it raises.
    """
    try:
        hook(*args)
    except Exception as exc:
        logger.exception(f"Warming hook {getattr(hook, '__name__', hook)} raised: {exc}")
