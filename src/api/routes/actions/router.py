"""Endpoints POST derivados das actions do registro de eventos.

Para cada ActionRoute:
1. Constrói o evento com o body decodificado como única entrada
2. Loga "event_created" (event_id, event)
3. Aguarda o processador de eventos
4. Responde 200 {"success": true, "result": ...}

Qualquer falha (construção ou processamento) vai para o normalizador de
erros. Sem retries e sem timeout: a requisição dura o que o processador
durar.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.middleware.errors import render_error
from app.events import ActionRoute
from app.observability import RequestContext, get_request_context, record_latency

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from app.protocols import EventProcessorProtocol

logger = logging.getLogger(__name__)


def create_action_endpoint(
    route: ActionRoute,
    process_event: EventProcessorProtocol,
) -> Callable[..., Awaitable[JSONResponse]]:
    """Cria o handler de uma action."""
    descriptor = route.descriptor
    action_name = route.action.name

    async def handle_action(
        context: RequestContext = Depends(get_request_context),
    ) -> JSONResponse:
        try:
            event = descriptor.create_event(context.body)
            context.logger.info(
                "event_created",
                extra={"event_id": event.id, "event": descriptor.event_type.__name__},
            )
            started = time.perf_counter()
            result: Any = await process_event(event)
            record_latency(
                "actions",
                action_name,
                (time.perf_counter() - started) * 1000,
                context.request_id,
            )
            content = {"success": True, "result": jsonable_encoder(result)}
        except Exception as exc:
            return render_error(exc, context)

        return JSONResponse(status_code=200, content=content)

    handle_action.__name__ = f"handle_{descriptor.name}"
    return handle_action


def create_actions_router(
    routes: Iterable[ActionRoute],
    process_event: EventProcessorProtocol,
) -> APIRouter:
    """Registra um POST por ActionRoute, na ordem recebida."""
    router = APIRouter()
    for route in routes:
        router.add_api_route(
            route.path,
            create_action_endpoint(route, process_event),
            methods=[route.method],
            name=f"action:{route.descriptor.name}",
            summary=route.action.name,
        )
        logger.debug(
            "action_route_registered",
            extra={"path": route.path, "event": route.descriptor.name},
        )
    return router
