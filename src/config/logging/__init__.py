"""Logging estruturado (JSON) do serviço.

Uso:
    import logging

    from config.logging import bind_logger, configure_logging

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="event_rest_interface")

    # Em qualquer módulo
    logger = logging.getLogger(__name__)
    logger.info("app_configured", extra={"action_routes": 3})

    # Logger vinculado a uma requisição
    request_logger = bind_logger(logger, request_id="4f1c...")
"""

from config.logging.adapters import BoundLogger, bind_logger
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS, configure_logging
from config.logging.filters import ServiceFilter
from config.logging.formatters import (
    BASE_LOG_FIELDS,
    FIELD_RENAME_MAP,
    REQUEST_LIFECYCLE_FIELDS,
    RequestLogFormatter,
    create_json_formatter,
)

__all__ = [
    "BASE_LOG_FIELDS",
    "DEFAULT_SERVICE_NAME",
    "FIELD_RENAME_MAP",
    "REQUEST_LIFECYCLE_FIELDS",
    "VALID_LOG_LEVELS",
    "BoundLogger",
    "RequestLogFormatter",
    "ServiceFilter",
    "bind_logger",
    "configure_logging",
    "create_json_formatter",
]
