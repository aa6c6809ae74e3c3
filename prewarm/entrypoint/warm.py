"""
CLI commands driving a warming scheduler against a live prediction API.
"""

import asyncio
from typing import Optional
import typer
from rich import print_json
from loguru import logger
from prewarm.exception import PrewarmError
from prewarm.warmer.scheduler import WarmingScheduler


def _overrides(**options) -> dict:
    return {key: value for key, value in options.items() if value is not None}


def warm_once(
    base_url: Optional[str] = typer.Option(
        None, help="Base URL of the prediction API (defaults to $PREWARM_API_URL)"
    ),
    target: Optional[str] = typer.Option(None, help="Target animation reference"),
    poll_interval: Optional[float] = typer.Option(
        None, help="Seconds between prediction status checks"
    ),
    max_polls: Optional[int] = typer.Option(
        None, help="Give up after this many status checks (default: unbounded)"
    ),
):
    """
    Send a single warm call and wait for the prediction to finish.
    """
    errors = []
    overrides = _overrides(
        base_url=base_url, target=target, poll_interval=poll_interval, max_polls=max_polls
    )

    async def _warm():
        async with WarmingScheduler(on_warming_error=errors.append, **overrides) as scheduler:
            await scheduler.warm()
            return scheduler.status()

    status = asyncio.run(_warm())
    print_json(status.model_dump_json())
    if errors:
        raise PrewarmError(f"Warm call failed: {errors[0]}")


def simulate_interactions(
    count: int = typer.Option(3, min=1, help="Number of interaction signals to send"),
    interval: float = typer.Option(1.0, min=0.0, help="Seconds between interaction signals"),
    cooldown: Optional[float] = typer.Option(
        None, help="Cooldown period in seconds (defaults to $PREWARM_COOLDOWN)"
    ),
    base_url: Optional[str] = typer.Option(
        None, help="Base URL of the prediction API (defaults to $PREWARM_API_URL)"
    ),
):
    """
    Push interaction signals through the trigger gate, then wait for queued work.
    """
    completed = []
    errors = []
    overrides = _overrides(cooldown_period=cooldown, base_url=base_url)

    async def _simulate():
        async with WarmingScheduler(
            on_warming_complete=lambda: completed.append(True),
            on_warming_error=errors.append,
            **overrides,
        ) as scheduler:
            for index in range(count):
                if index:
                    await asyncio.sleep(interval)
                logger.info(f"Interaction {index + 1}/{count}")
                scheduler.handle_interaction()
            await scheduler.drain()
            return scheduler.status()

    status = asyncio.run(_simulate())
    logger.info(f"Warm calls completed: {len(completed)}, errors: {len(errors)}")
    print_json(status.model_dump_json())
    if errors:
        raise PrewarmError(f"{len(errors)} warm call(s) failed, last error: {errors[-1]}")
