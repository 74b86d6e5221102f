"""Settings da interface REST.

Porta de escuta, limites de body, CORS e política para paths de
action duplicados.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings.base import env_flag, env_int

# Limite padrão do body JSON (100 KiB)
DEFAULT_BODY_LIMIT_BYTES = 100 * 1024


@dataclass(frozen=True)
class RestSettings:
    """Configurações da interface REST.

    Attributes:
        host: Interface de escuta
        port: Porta de escuta
        body_limit_bytes: Tamanho máximo do body JSON aceito
        cors_allow_origins: Origens permitidas (["*"] = todas)
        fail_on_duplicate_routes: Aborta o startup se dois eventos
            derivarem o mesmo path
    """

    host: str = "0.0.0.0"
    port: int = 8080
    body_limit_bytes: int = DEFAULT_BODY_LIMIT_BYTES
    cors_allow_origins: tuple[str, ...] = ("*",)
    fail_on_duplicate_routes: bool = True

    def validate(self) -> list[str]:
        """Valida configurações REST.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not 0 < self.port < 65536:
            errors.append(f"REST_PORT fora do intervalo: {self.port}")

        if self.body_limit_bytes <= 0:
            errors.append("REST_BODY_LIMIT_BYTES deve ser > 0")

        if not self.cors_allow_origins:
            errors.append("REST_CORS_ALLOW_ORIGINS não pode ser vazio")

        return errors


def _parse_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _load_rest_from_env() -> RestSettings:
    """Carrega RestSettings de variáveis de ambiente."""
    return RestSettings(
        host=os.getenv("REST_HOST", "0.0.0.0"),
        port=env_int("REST_PORT", 8080),
        body_limit_bytes=env_int("REST_BODY_LIMIT_BYTES", DEFAULT_BODY_LIMIT_BYTES),
        cors_allow_origins=_parse_origins(os.getenv("REST_CORS_ALLOW_ORIGINS", "*")),
        fail_on_duplicate_routes=env_flag("REST_FAIL_ON_DUPLICATE_ROUTES", default=True),
    )


@lru_cache(maxsize=1)
def get_rest_settings() -> RestSettings:
    """Retorna instância cacheada de RestSettings."""
    return _load_rest_from_env()
