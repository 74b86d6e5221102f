"""Instalação do logging JSON no processo.

Chamado uma vez pelo bootstrap quando o host não injeta um logger
próprio. Substitui os handlers do root por um único StreamHandler JSON.

Uso:
    from app.observability import RequestContextFilter
    from config.logging import configure_logging

    configure_logging(
        level="INFO",
        service_name="event_rest_interface",
        filters=[RequestContextFilter()],
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import ServiceFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Iterable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "event_rest_interface"

# O middleware de correlação já loga entrada e conclusão de cada requisição
QUIETED_LOGGERS = {"uvicorn.access": logging.WARNING}


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    filters: Iterable[logging.Filter] = (),
) -> logging.Handler:
    """Instala o handler JSON no root logger e o devolve.

    Args:
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL (case-insensitive).
        service_name: Valor do campo `service`.
        filters: Filters extras do handler (ex: request_id do contexto).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(ServiceFilter(service_name))
    for extra_filter in filters:
        handler.addFilter(extra_filter)

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    for name, quiet_level in QUIETED_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    return handler
