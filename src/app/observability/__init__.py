"""Observabilidade — contexto de requisição, logs estruturados, métricas.

Uso:
    from app.observability import get_request_context, get_request_id
    from app.observability import record_latency
"""

from app.observability.correlation import (
    RequestContext,
    RequestContextFilter,
    generate_request_id,
    get_current_request_context,
    get_request_context,
    get_request_id,
    reset_request_context,
    set_request_context,
)
from app.observability.metrics import record_latency

__all__ = [
    "RequestContext",
    "RequestContextFilter",
    "generate_request_id",
    "get_current_request_context",
    "get_request_context",
    "get_request_id",
    "record_latency",
    "reset_request_context",
    "set_request_context",
]
