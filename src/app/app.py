"""Interface REST do processamento de eventos.

Monta a aplicação ASGI (FastAPI) a partir do registro de eventos: cada
evento com action vira um POST, além do GET /health.

Pipeline (mais externo primeiro):
    RequestContextMiddleware → CORSMiddleware → JsonBodyMiddleware
    → rotas (health, actions) → normalizador de erros

Uso (host):
    interface = RESTInterface()
    await interface.start(
        config=get_service_settings(),
        events={"DoThing": DoThing},
        process_event=process_event,
        log=logging.getLogger("host.rest"),
    )
    ...
    await interface.stop()

Uso (testes):
    app = create_app(events, process_event)
    client = TestClient(app)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import JsonBodyMiddleware, RequestContextMiddleware, register_error_handlers
from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.events import EventRegistry, derive_action_routes
from config.settings import ServiceSettings, get_base_settings, get_service_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Mapping

    from app.events import DomainEvent
    from app.protocols import EventProcessorProtocol, HealthProbeProtocol
    from config.settings import RestSettings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação (logs de startup/shutdown)."""
    logger.info(
        "app_starting",
        extra={"action_routes": [route.path for route in app.state.action_routes]},
    )
    yield

    logger.info("app_shutting_down")


def create_app(
    events: EventRegistry | Mapping[str, type[DomainEvent]],
    process_event: EventProcessorProtocol,
    *,
    settings: RestSettings | None = None,
    health_probe: HealthProbeProtocol | None = None,
    base_logger: logging.Logger | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    As rotas de action são derivadas aqui, uma única vez, antes de
    qualquer requisição.

    Args:
        events: Registro de eventos (ou mapping nome → classe de evento).
        process_event: Processador assíncrono de eventos.
        settings: RestSettings; default lido do ambiente.
        health_probe: Probe de liveness; default sempre saudável.
        base_logger: Logger base dos loggers por requisição.

    Raises:
        DuplicateActionRouteError: Paths duplicados com fail_on_duplicate_routes.
    """
    rest_settings = settings or get_service_settings().rest
    registry = EventRegistry.coerce(events)
    action_routes = derive_action_routes(
        registry,
        fail_on_duplicates=rest_settings.fail_on_duplicate_routes,
    )

    debug = get_base_settings().debug
    fastapi_app = FastAPI(
        title="Event REST Interface",
        description="Actions do registro de eventos expostas via HTTP",
        version="1.0.0",
        lifespan=lifespan,
        # Docs só em debug: fora dele toda resposta é envelope
        docs_url="/docs" if debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if debug else None,
    )
    fastapi_app.state.action_routes = action_routes

    register_error_handlers(fastapi_app)

    # Starlette: o último middleware adicionado é o mais externo
    fastapi_app.add_middleware(JsonBodyMiddleware, limit_bytes=rest_settings.body_limit_bytes)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(rest_settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.add_middleware(RequestContextMiddleware, base_logger=base_logger)

    fastapi_app.include_router(create_api_router(action_routes, process_event, health_probe))

    logger.info(
        "app_configured",
        extra={"events": len(registry), "action_routes": len(action_routes)},
    )
    return fastapi_app


class RESTInterface:
    """Módulo REST no contrato do host (name, dependencies, start/stop)."""

    name = "rest"
    dependencies = ("config", "events", "log", "process_event")

    def __init__(self) -> None:
        self.app: FastAPI | None = None
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._log: logging.Logger = logger

    @property
    def running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    async def start(
        self,
        *,
        events: EventRegistry | Mapping[str, type[DomainEvent]],
        process_event: EventProcessorProtocol,
        config: ServiceSettings | None = None,
        log: logging.Logger | None = None,
        health_probe: HealthProbeProtocol | None = None,
    ) -> FastAPI:
        """Monta o app e inicia o servidor HTTP em background.

        Sem `log` injetado, o próprio módulo configura o logging JSON.
        """
        if self.running:
            raise RuntimeError("RESTInterface já iniciado")

        if log is None:
            initialize_app()
        self._log = log or logger
        settings = config or get_service_settings()
        port = settings.rest.port

        self._log.info("rest_interface_starting")
        validate_runtime_settings(settings)
        self.app = create_app(
            events,
            process_event,
            settings=settings.rest,
            health_probe=health_probe,
            base_logger=log,
        )
        self._server = uvicorn.Server(
            uvicorn.Config(
                self.app,
                host=settings.rest.host,
                port=port,
                log_config=None,
            )
        )
        self._serve_task = asyncio.create_task(self._server.serve())
        self._log.info("rest_interface_started", extra={"port": port})
        return self.app

    async def stop(self) -> None:
        """Solicita shutdown gracioso e aguarda o servidor encerrar."""
        if self._server is None or self._serve_task is None:
            return
        self._server.should_exit = True
        await self._serve_task
        self._server = None
        self._serve_task = None
        self._log.info("rest_interface_stopped")
