"""Runtime settings for sste, read from environment variables.

- ``SSTE_COST_PROFILE``: Argon2id cost tier used for password hashing and key
  derivation (``interactive``, ``moderate``, ``sensitive`` or ``minimum``).
- ``SSTE_LOG_LEVEL``: logging level name for the command line frontend.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from sste.crypto.profiles import DEFAULT_PROFILE, CostProfile, get_profile

logger = logging.getLogger(__name__)

ENV_COST_PROFILE = "SSTE_COST_PROFILE"
ENV_LOG_LEVEL = "SSTE_LOG_LEVEL"


@dataclass
class Settings:
    """Resolved configuration values."""

    profile: CostProfile = field(default=DEFAULT_PROFILE)
    log_level: int = logging.WARNING


def _resolve_profile(name: Optional[str]) -> CostProfile:
    if not name:
        return DEFAULT_PROFILE
    try:
        return get_profile(name)
    except KeyError:
        logger.warning(
            "unknown cost profile %r in %s; using %s",
            name,
            ENV_COST_PROFILE,
            DEFAULT_PROFILE.name,
        )
        return DEFAULT_PROFILE


def _resolve_log_level(name: Optional[str]) -> int:
    if not name:
        return logging.WARNING
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        logger.warning("unknown log level %r in %s; using WARNING", name, ENV_LOG_LEVEL)
        return logging.WARNING
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    return Settings(
        profile=_resolve_profile(env.get(ENV_COST_PROFILE)),
        log_level=_resolve_log_level(env.get(ENV_LOG_LEVEL)),
    )
