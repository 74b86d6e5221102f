"""Agregador de settings base.

Re-exporta settings base e helpers de leitura do ambiente.
"""

from __future__ import annotations

from config.settings.base.core import (
    DEFAULT_SERVICE_NAME,
    STRICT_ENVIRONMENTS,
    BaseSettings,
    Environment,
    env_flag,
    env_int,
    get_base_settings,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "STRICT_ENVIRONMENTS",
    "BaseSettings",
    "Environment",
    "env_flag",
    "env_int",
    "get_base_settings",
]
