"""Endpoint de health check (liveness)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.observability import RequestContext, get_request_context

if TYPE_CHECKING:
    from app.protocols import HealthProbeProtocol


async def always_healthy() -> bool:
    """Probe padrão: não verifica dependências, sempre saudável."""
    return True


def create_health_router(probe: HealthProbeProtocol | None = None) -> APIRouter:
    """Cria router com GET /health.

    Resposta: 200 {"healthy": true} ou 503 {"healthy": false}. Um probe
    que levanta exceção conta como não saudável.
    """
    health_probe = probe or always_healthy
    router = APIRouter()

    @router.get("/health")
    async def health_check(
        context: RequestContext = Depends(get_request_context),
    ) -> JSONResponse:
        """Liveness probe — verifica se o serviço está rodando."""
        try:
            healthy = bool(await health_probe())
        except Exception as exc:
            context.logger.warning(
                "health_probe_failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            healthy = False

        log = context.logger.info if healthy else context.logger.warning
        log("health_check_completed", extra={"healthy": healthy})
        return JSONResponse(content={"healthy": healthy}, status_code=200 if healthy else 503)

    return router
