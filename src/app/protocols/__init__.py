"""Protocolos e contratos do core da aplicação."""

from .event_processor import EventProcessorProtocol, HealthProbeProtocol

__all__ = [
    "EventProcessorProtocol",
    "HealthProbeProtocol",
]
