"""Environment-driven launch settings."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_FLASH_ATTENTION = "LAUNCH_FLASH_ATTENTION"
ENV_KV_CACHE_TYPE = "LAUNCH_KV_CACHE_TYPE"
ENV_DEBUG = "LAUNCH_DEBUG"
ENV_LOG_FILE = "LAUNCH_LOG_FILE"

_TRUE_VALUES = {"1", "t", "true", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "no", "off"}


@dataclass
class LaunchSettings:
    """Settings for a launch decision."""

    flash_attention: bool = False
    kv_cache_type: str = ""
    verbose: bool = False
    log_file: Optional[str] = None


def parse_bool(value: Optional[str], default: bool, name: str = "value") -> bool:
    """Parse a boolean environment value, keeping the default when unparsable."""
    if value is None or value.strip() == "":
        return default

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False

    logger.warning("Invalid boolean for %s: '%s', using default %s", name, value, default)
    return default


def load_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> LaunchSettings:
    """Read launch settings from environment variables."""
    env = os.environ if environ is None else environ

    return LaunchSettings(
        flash_attention=parse_bool(env.get(ENV_FLASH_ATTENTION), False, ENV_FLASH_ATTENTION),
        kv_cache_type=(env.get(ENV_KV_CACHE_TYPE) or "").strip().lower(),
        verbose=parse_bool(env.get(ENV_DEBUG), False, ENV_DEBUG),
        log_file=env.get(ENV_LOG_FILE) or None,
    )
