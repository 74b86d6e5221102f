"""Modelo base de eventos de domínio.

Um evento é uma mensagem tipada, validada na construção. Subclasses
declaram os campos do payload e, opcionalmente, uma ActionSpec que
expõe o evento como endpoint POST.

Exemplo:
    class CreateInvoice(DomainEvent):
        action: ClassVar[ActionSpec | None] = ActionSpec(name="createInvoice")

        customer_id: str
        amount_cents: int
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class ActionSpec:
    """Marca um evento como invocável via HTTP.

    Atributos:
        name: Nome da action (ex: "doThing")
        path: Path explícito; se ausente, deriva de `name` em kebab-case
    """

    name: str
    path: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("ActionSpec.name não pode ser vazio")


class DomainEvent(BaseModel):
    """Base de todos os eventos de domínio."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: ClassVar[ActionSpec | None] = None

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def event_type(cls) -> str:
        return cls.__name__
