"""Eventos de domínio — modelo base, registro e derivação de rotas."""

from app.events.base import ActionSpec, DomainEvent
from app.events.registry import EventDescriptor, EventRegistry
from app.events.routes import (
    ACTION_METHOD,
    ActionRoute,
    derive_action_routes,
    kebab_case,
    resolve_action_path,
)

__all__ = [
    "ACTION_METHOD",
    "ActionRoute",
    "ActionSpec",
    "DomainEvent",
    "EventDescriptor",
    "EventRegistry",
    "derive_action_routes",
    "kebab_case",
    "resolve_action_path",
]
