"""
Warming scheduler: fires warm calls at a remote inference endpoint on user
interaction, rate limited by a cooldown anchored at the last successful warm.

Everything runs on one asyncio event loop. The `in_progress` flag is the only
mutual exclusion between cycles; there is no lock.
"""

import time
import asyncio
import aiohttp
from typing import Callable, Optional, Set
from loguru import logger
from prewarm.config import WarmerConfig, get_config
from prewarm.exception import (
    HttpStatusError,
    PollTimeoutError,
    PredictionFailedError,
    UnexpectedError,
    WarmingError,
)
from prewarm.util.http_client import PredictionClient
from prewarm.util.image import create_placeholder_image
from prewarm.warmer.hooks import safe_call
from prewarm.warmer.state import Prediction, WarmingState, WarmingStatus
from prewarm.warmer.timer import PendingFire


def default_client_factory(config: WarmerConfig) -> PredictionClient:
    return PredictionClient(
        config.base_url,
        warm_path=config.warm_path,
        status_path=config.status_path,
        timeout=aiohttp.ClientTimeout(total=config.request_timeout),
    )


class WarmingScheduler:
    """
    Debounced, cooldown-gated warm call trigger.

    Example:
        >>> scheduler = WarmingScheduler(cooldown_period=10.0)
        >>> scheduler.handle_interaction()  # from inside a running event loop
        >>> scheduler.freeze()              # a real inference call starts
        >>> scheduler.reset()               # ...and finished
        >>> scheduler.close()
    """

    def __init__(
        self,
        config: Optional[WarmerConfig] = None,
        client_factory: Optional[Callable[[WarmerConfig], PredictionClient]] = None,
        image_factory: Callable[[], str] = create_placeholder_image,
        clock: Callable[[], float] = time.time,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        **overrides,
    ):
        """
        Constructor.

        Args:
            config: Base configuration; defaults to `get_config()`.
            client_factory: Builds the async-context-managed API client for a cycle.
            image_factory: Produces the data URI sent as the warm call source.
            clock: Wall clock in seconds, used for cooldown bookkeeping.
            loop: Event loop for timers and tasks; defaults to the running loop.
            **overrides: Partial config merged on top of `config`.
        """
        config = config or get_config()
        self._config = config.merge(**overrides) if overrides else config
        self._client_factory = client_factory or default_client_factory
        self._image_factory = image_factory
        self._clock = clock
        self._loop = loop
        self._state = WarmingState()
        self._pending_timer: Optional[PendingFire] = None
        self._tasks: Set[asyncio.Task] = set()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def config(self) -> WarmerConfig:
        return self._config

    @property
    def state(self) -> WarmingState:
        return self._state

    @property
    def pending_timer(self) -> Optional[PendingFire]:
        return self._pending_timer

    @property
    def in_progress(self) -> bool:
        return self._state.in_progress

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def update_config(self, **changes) -> WarmerConfig:
        """
        Merge a partial config; applies from the next trigger/cycle on.
        """
        self._config = self._config.merge(**changes)
        return self._config

    def remaining_cooldown(self) -> float:
        """
        Seconds left before the cooldown since the last successful warm ends.
        """
        elapsed = self._clock() - self._state.last_successful_warm_at
        return max(0.0, self._config.cooldown_period - elapsed)

    def handle_interaction(self) -> Optional[asyncio.Task]:
        """
        Entry point for user interaction events (touch, click, ...).
        """
        return self.trigger()

    def trigger(self) -> Optional[asyncio.Task]:
        """
        Fire a warm call now, queue one for when the cooldown ends, or drop
        the trigger if a cycle is already in progress.

        Returns the cycle task when it fired immediately, else None.
        Must run inside an event loop unless one was injected; without one
        the trigger is dropped and no state changes.
        """
        if self._state.in_progress:
            logger.info("Warm call already in progress, skipping interaction")
            return None

        loop = self._resolve_loop()
        if loop is None:
            logger.warning("No running event loop, dropping warm trigger")
            return None

        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None

        remaining = self.remaining_cooldown()
        if remaining > 0:
            logger.info(f"Queueing warm call in {remaining:.3f}s (trigger: interaction)")
            self._pending_timer = PendingFire(remaining, self._fire_pending, loop=loop)
            return None
        return self._start(loop)

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _fire_pending(self) -> None:
        # No in_progress re-check here: the cycle's entry guard is the only backstop.
        self._pending_timer = None
        self._start(self._get_loop())

    def _begin(self) -> WarmerConfig:
        """
        Synchronous entry of a cycle: claim the flag and fire the start hook.
        Returns the config snapshot the cycle runs with.
        """
        config = self._config
        self._state.in_progress = True
        logger.info("Making warm call to prediction API")
        safe_call(config.hooks.on_warming_start)
        return config

    def _start(self, loop: asyncio.AbstractEventLoop) -> Optional[asyncio.Task]:
        if self._state.in_progress:
            return None
        config = self._begin()
        task = loop.create_task(self._run_cycle(config))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def warm(self) -> None:
        """
        Run one warm cycle to completion; no-op if one is already running.

        Never raises: failures go to the error hook.
        """
        if self._state.in_progress:
            return
        await self._run_cycle(self._begin())

    async def _run_cycle(self, config: WarmerConfig) -> None:
        """
        Create the warm prediction, poll it until terminal, and record the outcome.
        Expects `_begin` to have run; always clears `in_progress`.
        """
        hooks = config.hooks
        try:
            source = self._image_factory()
            async with self._client_factory(config) as client:
                try:
                    prediction = await client.create_warm_prediction(source, config.target)
                except HttpStatusError as exc:
                    safe_call(hooks.on_warming_error, exc)
                    return

                for line in prediction.logs or []:
                    logger.info(f"[{prediction.prediction_id}] {line}")

                final = await self._poll(client, prediction, config)

            self._state.last_warm_attempt_at = self._clock()
            if final.succeeded:
                logger.info("Warm call completed successfully")
                self._state.last_successful_warm_at = self._clock()
                safe_call(hooks.on_warming_complete)
            else:
                error = PredictionFailedError(prediction.prediction_id, final.error)
                logger.warning(str(error))
                safe_call(hooks.on_warming_error, error)
        except WarmingError as exc:
            self._state.last_warm_attempt_at = self._clock()
            logger.warning(f"Warming error: {exc}")
            safe_call(hooks.on_warming_error, exc)
        except Exception as exc:
            self._state.last_warm_attempt_at = self._clock()
            logger.warning(f"Warming error: {exc}")
            error = UnexpectedError(exc)
            error.__cause__ = exc
            safe_call(hooks.on_warming_error, error)
        finally:
            self._state.in_progress = False

    async def _poll(self, client, prediction: Prediction, config: WarmerConfig) -> Prediction:
        """
        Re-fetch the prediction every poll interval until it is terminal.
        Unbounded unless `max_polls` is configured.
        """
        current = prediction
        polls = 0
        while not current.is_terminal:
            if config.max_polls is not None and polls >= config.max_polls:
                raise PollTimeoutError(prediction.prediction_id, polls)
            await asyncio.sleep(config.poll_interval)
            polls += 1
            logger.debug(f"Polling warm prediction {prediction.prediction_id} (check {polls})")
            current = await client.get_prediction(prediction.prediction_id)
        return current

    def freeze(self) -> None:
        """
        Block warming while a real inference call is in flight.
        Pending timers are left alone; their fire will hit the entry guard.
        """
        self._state.in_progress = True
        logger.info("Warming frozen - real prediction in flight")

    def reset(self) -> None:
        """
        Unfreeze after a real inference call, restarting the cooldown from now.
        """
        self._state.in_progress = False
        self._state.last_successful_warm_at = self._clock()
        logger.info("Cooldown reset - real prediction completed")

    def can_warm(self) -> bool:
        elapsed = self._clock() - self._state.last_successful_warm_at
        return not self._state.in_progress and elapsed > self._config.cooldown_period

    def status(self) -> WarmingStatus:
        """
        Snapshot of the current state; no side effects.
        """
        now = self._clock()
        return WarmingStatus(
            in_progress=self._state.in_progress,
            last_warm_attempt_at=self._state.last_warm_attempt_at,
            time_since_last_warm=now - self._state.last_warm_attempt_at,
            time_since_last_successful_warm=now - self._state.last_successful_warm_at,
            can_warm=self.can_warm(),
        )

    async def drain(self) -> None:
        """
        Wait until no delayed fire is pending and no cycle task is running.
        """
        loop = self._get_loop()
        while True:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            elif self._pending_timer is not None and self._pending_timer.active:
                await asyncio.sleep(max(0.0, self._pending_timer.when - loop.time()))
            else:
                return

    def close(self) -> None:
        """
        Cancel any pending delayed fire. Safe to call repeatedly.
        """
        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None

    stop = close
