"""Agregador de settings do serviço.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)

# REST interface settings
from config.settings.rest import (
    DEFAULT_BODY_LIMIT_BYTES,
    RestSettings,
    get_rest_settings,
)

# Settings agregadas
from config.settings.service import ServiceSettings, get_service_settings

__all__ = [
    # Constants
    "DEFAULT_BODY_LIMIT_BYTES",
    # Base
    "BaseSettings",
    "Environment",
    # REST
    "RestSettings",
    "ServiceSettings",
    "get_base_settings",
    "get_rest_settings",
    "get_service_settings",
]
