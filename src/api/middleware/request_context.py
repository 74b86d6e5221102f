"""Middleware de correlação de requisições.

Primeiro estágio do pipeline. Para cada requisição HTTP:
1. Gera request_id (UUID v4) e logger vinculado a ele
2. Loga "handling_request" (ip, ips, url, method, headers)
3. Publica o RequestContext na ContextVar durante o processamento
4. Exceção que escapa do app interno antes da resposta vira envelope
   via normalizador, ainda dentro do contexto (request_id no log e no header)
5. Loga "request_completed" (duration_ms, status_code) exatamente uma vez

O request_id também volta no header X-Request-ID. O body da resposta
nunca é alterado.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection

from api.middleware.errors import render_error
from app.observability import RequestContext, reset_request_context, set_request_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def describe_request(scope: Scope) -> dict[str, Any]:
    """Campos de entrada logados em "handling_request"."""
    connection = HTTPConnection(scope)
    forwarded_for = connection.headers.get("x-forwarded-for", "")
    url = connection.url.path
    if connection.url.query:
        url = f"{url}?{connection.url.query}"
    return {
        "ip": connection.client.host if connection.client else None,
        "ips": [ip.strip() for ip in forwarded_for.split(",") if ip.strip()],
        "url": url,
        "method": scope.get("method"),
        "headers": dict(connection.headers),
    }


class RequestContextMiddleware:
    """Middleware ASGI puro que cria e encerra o RequestContext."""

    def __init__(self, app: ASGIApp, base_logger: logging.Logger | None = None) -> None:
        self.app = app
        self._logger = base_logger or logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        context = RequestContext.start(self._logger)
        token = set_request_context(context)
        context.logger.info("handling_request", extra=describe_request(scope))

        status_code = 500
        response_started = False

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code, response_started
            if message["type"] == "http.response.start":
                response_started = True
                status_code = message["status"]
                headers = MutableHeaders(scope=message)
                headers.append(REQUEST_ID_HEADER, context.request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as exc:
            # Com a resposta já iniciada não há como trocar o status
            if response_started:
                raise
            response = render_error(exc, context)
            await response(scope, receive, send_with_request_id)
        finally:
            context.logger.info(
                "request_completed",
                extra={
                    "duration_ms": round(context.elapsed_ms(), 3),
                    "status_code": status_code,
                },
            )
            reset_request_context(token)
