"""Protocolos dos colaboradores externos da interface REST.

O processador de eventos e o probe de saúde são fornecidos pelo host;
esta camada só depende dos contratos abaixo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.events.base import DomainEvent


class EventProcessorProtocol(Protocol):
    """Executa um evento validado e devolve o resultado de domínio.

    Pode levantar exceção; erros tipados (ServiceError) definem o status HTTP.
    O resultado é opaco para a camada HTTP.
    """

    async def __call__(self, event: DomainEvent) -> Any: ...


class HealthProbeProtocol(Protocol):
    """Verificação de liveness; True = saudável."""

    async def __call__(self) -> bool: ...
