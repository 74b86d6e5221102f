"""Contexto por requisição: request_id, logger vinculado e timestamps.

O RequestContext é criado pelo middleware de correlação na entrada do
pipeline e descartado quando a resposta termina. Vive em uma ContextVar
(thread/async-safe) e chega aos handlers via dependência FastAPI,
sem ser anexado ao Request/Response.

Uso:
    from app.observability import RequestContext, set_request_context

    # Em middleware
    context = RequestContext.start(logger)
    token = set_request_context(context)
    try:
        # processar request
    finally:
        reset_request_context(token)

    # Em handlers
    async def endpoint(context: RequestContext = Depends(get_request_context)): ...
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from config.logging import BoundLogger, bind_logger

_request_context: ContextVar[RequestContext | None] = ContextVar(
    "request_context", default=None
)


@dataclass(slots=True)
class RequestContext:
    """Estado transitório de uma requisição.

    Atributos:
        request_id: UUID v4 gerado na entrada
        logger: Logger vinculado a {request_id}
        started_at: Momento de entrada (UTC)
        started_counter: Marca de perf_counter para cálculo de duração
        body: Body JSON decodificado ({} quando ausente)
    """

    request_id: str
    logger: BoundLogger
    started_at: datetime
    started_counter: float
    body: Any = field(default_factory=dict)

    @classmethod
    def start(cls, logger: logging.Logger | BoundLogger) -> RequestContext:
        request_id = generate_request_id()
        return cls(
            request_id=request_id,
            logger=bind_logger(logger, request_id=request_id),
            started_at=datetime.now(UTC),
            started_counter=time.perf_counter(),
        )

    def elapsed_ms(self) -> float:
        """Tempo decorrido desde a entrada, em milissegundos (>= 0)."""
        return max(0.0, (time.perf_counter() - self.started_counter) * 1000)


def generate_request_id() -> str:
    """Gera um novo request_id (UUID v4)."""
    return str(uuid.uuid4())


def get_current_request_context() -> RequestContext | None:
    """Retorna o RequestContext ativo ou None fora de uma requisição."""
    return _request_context.get()


def set_request_context(context: RequestContext) -> Token[RequestContext | None]:
    """Define o RequestContext ativo.

    Returns:
        Token para reset posterior via reset_request_context().
    """
    return _request_context.set(context)


def reset_request_context(token: Token[RequestContext | None]) -> None:
    """Restaura o RequestContext anterior."""
    _request_context.reset(token)


def get_request_id() -> str:
    """Retorna o request_id ativo ou string vazia (usado pelo RequestContextFilter)."""
    context = _request_context.get()
    return context.request_id if context is not None else ""


async def get_request_context() -> RequestContext:
    """Dependência FastAPI que entrega o RequestContext da requisição.

    Raises:
        RuntimeError: Se chamada fora do middleware de correlação.
    """
    context = _request_context.get()
    if context is None:
        raise RuntimeError("RequestContext ausente: RequestContextMiddleware não instalado")
    return context


class RequestContextFilter(logging.Filter):
    """Preenche `record.request_id` a partir do RequestContext ativo.

    Um request_id já presente no record (vindo de um BoundLogger) é
    mantido; fora de uma requisição o campo fica vazio.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_request_id()
        return True
