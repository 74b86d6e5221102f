"""Formatter JSON dos logs do serviço.

Uma linha JSON por record. Ordem das chaves:
1. Campos base: timestamp, level, logger, message, service, request_id
2. Ciclo de vida da requisição (quando presentes): method, url,
   status_code, duration_ms
3. Demais campos passados via `extra`, na ordem recebida
"""

from __future__ import annotations

from typing import Any

from pythonjsonlogger.json import JsonFormatter

# Atributos do LogRecord sempre serializados
RECORD_FIELDS = ("levelname", "name", "message", "service", "request_id")

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

BASE_LOG_FIELDS = ("timestamp", "level", "logger", "message", "service", "request_id")

# Campos de handling_request / request_completed
REQUEST_LIFECYCLE_FIELDS = ("method", "url", "status_code", "duration_ms")

LOG_FIELD_ORDER = BASE_LOG_FIELDS + REQUEST_LIFECYCLE_FIELDS


class RequestLogFormatter(JsonFormatter):
    """JsonFormatter com timestamp UTC e chaves em ordem estável.

    Exemplo:
        {"timestamp": "2026-10-18T10:30:00.120000+00:00", "level": "INFO",
         "logger": "api.middleware.request_context",
         "message": "request_completed", "service": "event_rest_interface",
         "request_id": "4f1c...", "status_code": 200, "duration_ms": 3.41}
    """

    def process_log_record(self, log_data: dict[str, Any]) -> dict[str, Any]:
        ordered = {key: log_data.pop(key) for key in LOG_FIELD_ORDER if key in log_data}
        ordered.update(log_data)
        return ordered


def create_json_formatter() -> RequestLogFormatter:
    return RequestLogFormatter(
        " ".join(f"%({field})s" for field in RECORD_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
        timestamp=True,
    )
