"""Settings agregadas do serviço (config.base, config.rest)."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from config.settings.base import BaseSettings, get_base_settings
from config.settings.rest import RestSettings, get_rest_settings


@dataclass(frozen=True)
class ServiceSettings:
    """Configuração entregue ao módulo REST pelo host."""

    base: BaseSettings = field(default_factory=BaseSettings)
    rest: RestSettings = field(default_factory=RestSettings)

    def validate(self) -> list[str]:
        errors = [f"base: {error}" for error in self.base.validate()]
        errors.extend(f"rest: {error}" for error in self.rest.validate())
        return errors


@lru_cache(maxsize=1)
def get_service_settings() -> ServiceSettings:
    """Retorna instância cacheada de ServiceSettings (a partir do ambiente)."""
    return ServiceSettings(base=get_base_settings(), rest=get_rest_settings())
