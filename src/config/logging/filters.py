"""Filters de logging.

ServiceFilter carimba o nome do serviço em todo record. O request_id vem
de app.observability.RequestContextFilter, que conhece o contexto da
requisição; os dois são instalados juntos pelo bootstrap.
"""

from __future__ import annotations

import logging


class ServiceFilter(logging.Filter):
    """Define `record.service`; nunca descarta records."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True
