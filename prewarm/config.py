import os
from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from typing import Optional
from loguru import logger
from prewarm.constants import (
    API_URL_ENV,
    COOLDOWN_ENV,
    DEFAULT_API_BASE_URL,
    DEFAULT_COOLDOWN_PERIOD,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_POLLS_ENV,
    POLL_INTERVAL_ENV,
    STATUS_PATH,
    WARM_PATH,
    WARM_TARGET,
)
from prewarm.exception import ConfigurationError
from prewarm.warmer.hooks import CallbackHooks, WarmingHooks

HOOK_SHORTCUTS = ("on_warming_start", "on_warming_complete", "on_warming_error")


@dataclass(frozen=True)
class WarmerConfig:
    """
    Immutable settings for a warming scheduler.

    Durations are in seconds. Use `merge` to derive an updated copy.
    """

    cooldown_period: float = DEFAULT_COOLDOWN_PERIOD
    hooks: WarmingHooks = field(default_factory=WarmingHooks)
    base_url: str = DEFAULT_API_BASE_URL
    warm_path: str = WARM_PATH
    status_path: str = STATUS_PATH
    target: str = WARM_TARGET
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_polls: Optional[int] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self):
        if self.cooldown_period < 0:
            raise ConfigurationError(f"cooldown_period must be >= 0, got {self.cooldown_period}")
        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.max_polls is not None and self.max_polls < 1:
            raise ConfigurationError(f"max_polls must be >= 1 or None, got {self.max_polls}")
        if self.request_timeout <= 0:
            raise ConfigurationError(f"request_timeout must be > 0, got {self.request_timeout}")
        if "{prediction_id}" not in self.status_path:
            raise ConfigurationError(
                f"status_path must contain a {{prediction_id}} placeholder: {self.status_path}"
            )

    def merge(self, **changes) -> "WarmerConfig":
        """
        Merge a partial configuration into a new config.

        Accepts any field name, plus the callback shortcuts `on_warming_start`,
        `on_warming_complete` and `on_warming_error`, which are folded into the
        hooks object.
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known - set(HOOK_SHORTCUTS)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        callbacks = {key: changes.pop(key) for key in HOOK_SHORTCUTS if key in changes}
        if callbacks:
            hooks = changes.get("hooks", self.hooks)
            if isinstance(hooks, CallbackHooks):
                changes["hooks"] = hooks.replace(**callbacks)
            else:
                changes["hooks"] = CallbackHooks(fallback=hooks, **callbacks)
        return replace(self, **changes)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


@lru_cache(maxsize=1)
def get_config() -> WarmerConfig:
    """
    Get the default warmer configuration, built from environment variables.

    This function is cached to avoid repeated environment variable lookups.

    Returns:
        WarmerConfig: Configuration with env overrides applied.

    Raises:
        ConfigurationError: If an env var holds an invalid value.
    """
    max_polls = os.getenv(MAX_POLLS_ENV)
    try:
        max_polls = int(max_polls) if max_polls else None
    except ValueError:
        raise ConfigurationError(f"{MAX_POLLS_ENV} must be an integer, got {max_polls!r}")
    config = WarmerConfig(
        base_url=os.getenv(API_URL_ENV, DEFAULT_API_BASE_URL),
        cooldown_period=_env_float(COOLDOWN_ENV, DEFAULT_COOLDOWN_PERIOD),
        poll_interval=_env_float(POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL),
        max_polls=max_polls,
    )
    logger.debug(
        f"Configured warmer: base_url={config.base_url} cooldown={config.cooldown_period}s "
        f"poll_interval={config.poll_interval}s max_polls={config.max_polls}"
    )
    return config


def reload_config() -> WarmerConfig:
    """
    Force reload the configuration from the environment.

    Useful for testing or when the environment has changed.
    """
    get_config.cache_clear()
    return get_config()
