"""Agregador de rotas — health e actions derivadas do registro.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router(action_routes, process_event))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from api.routes.actions.router import create_actions_router
from api.routes.health.router import create_health_router

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.events import ActionRoute
    from app.protocols import EventProcessorProtocol, HealthProbeProtocol


def create_api_router(
    action_routes: Iterable[ActionRoute],
    process_event: EventProcessorProtocol,
    health_probe: HealthProbeProtocol | None = None,
) -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health check na raiz (/health); registrado antes das actions
    api_router.include_router(create_health_router(health_probe), tags=["health"])

    # Um POST por evento com action
    api_router.include_router(
        create_actions_router(action_routes, process_event),
        tags=["actions"],
    )

    return api_router
