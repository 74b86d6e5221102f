"""Settings base do serviço e leitura tipada de variáveis de ambiente.

Variáveis:
- ENVIRONMENT: development | staging | production (aliases: dev, stage, prod)
- SERVICE_NAME: campo `service` de todo log
- DEBUG: habilita /docs e /openapi.json
- LOG_LEVEL: nível do logging JSON
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, get_args

from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS

Environment = Literal["development", "staging", "production"]

# Ambientes onde settings inválidas abortam o startup
STRICT_ENVIRONMENTS = frozenset({"staging", "production"})

_ENVIRONMENT_ALIASES = {
    "dev": "development",
    "local": "development",
    "stage": "staging",
    "prod": "production",
}

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


def env_flag(name: str, default: bool = False) -> bool:
    """Lê variável booleana ("true", "1", "yes", "on" = True)."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def env_int(name: str, default: int) -> int:
    """Lê variável inteira.

    Raises:
        ValueError: Se o valor não for um inteiro.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} deve ser inteiro: {raw!r}") from exc


@dataclass(frozen=True)
class BaseSettings:
    """Configurações comuns ao processo.

    Attributes:
        environment: Ambiente de execução; valor desconhecido é mantido
            para que validate() o reporte
        service_name: Nome do serviço nos logs
        debug: Expõe a documentação OpenAPI
        log_level: Nível do logging JSON
    """

    environment: str = "development"
    service_name: str = DEFAULT_SERVICE_NAME
    debug: bool = False
    log_level: str = "INFO"

    @property
    def strict(self) -> bool:
        """True quando settings inválidas devem abortar o startup."""
        return self.environment in STRICT_ENVIRONMENTS

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.environment not in get_args(Environment):
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name.strip():
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")

        return errors


def _parse_environment(raw: str) -> str:
    value = raw.strip().lower() or "development"
    return _ENVIRONMENT_ALIASES.get(value, value)


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings (a partir do ambiente)."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", DEFAULT_SERVICE_NAME),
        debug=env_flag("DEBUG"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )
