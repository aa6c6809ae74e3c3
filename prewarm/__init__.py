from prewarm.config import WarmerConfig, get_config
from prewarm.warmer.hooks import CallbackHooks, WarmingHooks
from prewarm.warmer.scheduler import WarmingScheduler

__all__ = [
    "CallbackHooks",
    "WarmerConfig",
    "WarmingHooks",
    "WarmingScheduler",
    "get_config",
]
