"""Registro de eventos: nome → EventDescriptor.

Populado uma vez no startup e somente leitura depois disso. A ordem de
iteração é a ordem de registro.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from app.events.base import ActionSpec, DomainEvent
from utils.errors import DuplicateEventError


@dataclass(frozen=True, slots=True)
class EventDescriptor:
    """Identifica um tipo de evento e sua action opcional.

    Atributos:
        name: Nome único do evento no registro
        event_type: Classe do evento (construtor)
        action: ActionSpec, ou None se o evento não é exposto
    """

    name: str
    event_type: type[DomainEvent]
    action: ActionSpec | None = None

    @classmethod
    def from_event_type(
        cls, event_type: type[DomainEvent], name: str | None = None
    ) -> EventDescriptor:
        """Cria descriptor lendo a ActionSpec declarada na classe."""
        return cls(
            name=name or event_type.event_type(),
            event_type=event_type,
            action=event_type.action,
        )

    def create_event(self, payload: Any) -> DomainEvent:
        """Constrói o evento a partir do body decodificado.

        Raises:
            pydantic.ValidationError: Se o payload não satisfaz o evento.
        """
        return self.event_type.model_validate(payload)


class EventRegistry(Mapping[str, EventDescriptor]):
    """Mapping ordenado e imutável de descriptors."""

    def __init__(self, descriptors: Iterable[EventDescriptor] = ()) -> None:
        self._descriptors: dict[str, EventDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._descriptors:
                raise DuplicateEventError(f"Evento registrado duas vezes: {descriptor.name}")
            self._descriptors[descriptor.name] = descriptor

    @classmethod
    def from_mapping(cls, events: Mapping[str, type[DomainEvent]]) -> EventRegistry:
        """Cria registro a partir de {nome: classe de evento}."""
        return cls(
            EventDescriptor.from_event_type(event_type, name=name)
            for name, event_type in events.items()
        )

    @classmethod
    def coerce(
        cls, events: EventRegistry | Mapping[str, type[DomainEvent]]
    ) -> EventRegistry:
        """Aceita um EventRegistry pronto ou um mapping de classes."""
        if isinstance(events, EventRegistry):
            return events
        return cls.from_mapping(events)

    def __getitem__(self, name: str) -> EventDescriptor:
        return self._descriptors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"EventRegistry({list(self._descriptors)!r})"
