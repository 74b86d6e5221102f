"""Normalização de erros em envelope JSON.

Toda falha vira {"success": false, "message": ...} com o status do erro.
Falhas de cliente (< 500) devolvem a própria mensagem; falhas de servidor
devolvem safe_message ou mensagem genérica. O erro completo sempre vai
para o log: WARNING para < 500, ERROR (com traceback) para o resto.

Pontos de chamada:
- Interceptor de body JSON (api/middleware/json_body.py)
- catch do handler de action (api/routes/actions/router.py)
- Exception handler do app (404/405 de roteamento)
- Middleware de correlação (exceção que escapou do pipeline)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.observability import get_current_request_context
from utils.errors import (
    BadRequestError,
    InternalServerError,
    ServiceError,
    error_for_status,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fastapi import FastAPI, Request

    from app.observability import RequestContext

logger = logging.getLogger(__name__)


def summarize_validation_error(exc: ValidationError) -> str:
    """Resume erros de validação do evento em uma linha legível."""
    parts = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "invalid event payload: " + "; ".join(parts)


def classify_error(exc: BaseException) -> ServiceError:
    """Converte qualquer exceção em ServiceError tipado.

    - ServiceError: mantido
    - HTTPException (Starlette/FastAPI): erro do status declarado
    - pydantic.ValidationError (construtor do evento): BadRequestError
    - demais: InternalServerError com detalhe interno preservado para log
    """
    if isinstance(exc, ServiceError):
        return exc
    if isinstance(exc, StarletteHTTPException):
        error: ServiceError = error_for_status(exc.status_code, str(exc.detail))
    elif isinstance(exc, ValidationError):
        error = BadRequestError(summarize_validation_error(exc))
    else:
        error = InternalServerError(
            str(exc),
            internal_detail=f"{type(exc).__name__}: {exc}",
        )
    error.__cause__ = exc
    return error


def render_error(
    exc: BaseException,
    context: RequestContext | None = None,
    *,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Loga a falha e devolve a resposta com o envelope de erro."""
    error = classify_error(exc)
    status = error.http_status
    if headers is None and isinstance(exc, StarletteHTTPException):
        headers = exc.headers
    log = context.logger if context is not None else logger

    extra: dict[str, Any] = {
        "status_code": status,
        "error_kind": error.kind,
        "error_type": type(exc).__name__,
        "error": error.internal_detail,
    }
    if error.is_client_fault:
        log.warning("request_failed", extra=extra)
    else:
        log.error("request_failed", extra=extra, exc_info=exc)

    return JSONResponse(
        status_code=status,
        content={"success": False, "message": error.client_message},
        headers=dict(headers) if headers else None,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Falhas de roteamento (404 path desconhecido, 405 método) como envelope."""
    return render_error(exc, get_current_request_context())


def register_error_handlers(app: FastAPI) -> None:
    """Registra os exception handlers do app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
