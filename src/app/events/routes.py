"""Derivação de rotas de action a partir do registro de eventos.

Executada uma única vez na construção do app, antes de qualquer
requisição. Cada evento com ActionSpec vira uma rota POST; eventos sem
action são ignorados.

Regra de path: "/" + (action.path ou kebab_case(action.name)).
    ActionSpec(name="doThing")                → /do-thing
    ActionSpec(name="doThing", path="custom") → /custom
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass

from app.events.base import ActionSpec
from app.events.registry import EventDescriptor, EventRegistry
from utils.errors import DuplicateActionRouteError

logger = logging.getLogger(__name__)

# Letras sem decomposição NFKD que o deburr ainda translitera
_DEBURR_TABLE = str.maketrans(
    {
        "ß": "ss",
        "æ": "ae",
        "Æ": "Ae",
        "œ": "oe",
        "Œ": "Oe",
        "ø": "o",
        "Ø": "O",
        "đ": "d",
        "Đ": "D",
        "ð": "d",
        "Ð": "D",
        "ł": "l",
        "Ł": "L",
        "þ": "th",
        "Þ": "Th",
        "ı": "i",
    }
)

_APOSTROPHES = re.compile("['’]")

# Mesma precedência do words() do lodash; ordinais (1st, 22nd, 4TH) antes
# dos dígitos. Letras sem caixa ASCII (ex: cirílico) não sofrem quebra interna
_WORD_PATTERN = re.compile(
    r"[A-Z]+(?=[A-Z][a-z])"
    r"|[A-Z]?[a-z]+"
    r"|[A-Z]+"
    r"|\d*(?:1st|2nd|3rd|(?![123])\dth)(?=\b|[A-Z_])"
    r"|\d*(?:1ST|2ND|3RD|(?![123])\dTH)(?=\b|[a-z_])"
    r"|\d+"
    r"|[^\W\dA-Za-z_]+"
)

ACTION_METHOD = "POST"


@dataclass(frozen=True, slots=True)
class ActionRoute:
    """Rota POST derivada de um evento com action."""

    path: str
    descriptor: EventDescriptor
    action: ActionSpec
    method: str = ACTION_METHOD


def deburr(value: str) -> str:
    """Remove acentos e translitera letras latinas ("café" → "cafe", "Straße" → "Strasse")."""
    decomposed = unicodedata.normalize("NFKD", value.translate(_DEBURR_TABLE))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def kebab_case(value: str) -> str:
    """Converte para kebab-case.

    Exemplos:
        "doThing"      → "do-thing"
        "HTTPRequest"  → "http-request"
        "café au lait" → "cafe-au-lait"
        "get1stItem"   → "get-1st-item"
    """
    text = _APOSTROPHES.sub("", deburr(value))
    return "-".join(word.lower() for word in _WORD_PATTERN.findall(text))


def resolve_action_path(action: ActionSpec) -> str:
    """Calcula o path da rota para uma ActionSpec."""
    raw_path = action.path or kebab_case(action.name)
    return "/" + raw_path.lstrip("/")


def derive_action_routes(
    registry: EventRegistry,
    *,
    fail_on_duplicates: bool = True,
) -> list[ActionRoute]:
    """Percorre o registro em ordem e devolve as rotas de action.

    Args:
        registry: Registro de eventos (somente leitura).
        fail_on_duplicates: Se True, path duplicado aborta o startup.
            Se False, registra warning e mantém ambas as rotas; a primeira
            registrada atende as requisições.

    Raises:
        DuplicateActionRouteError: Dois eventos derivaram o mesmo path.
    """
    routes: list[ActionRoute] = []
    owners: dict[str, str] = {}

    for name, descriptor in registry.items():
        action = descriptor.action
        if action is None:
            logger.debug("event_action_skipped", extra={"event": name})
            continue

        path = resolve_action_path(action)

        if path in owners:
            if fail_on_duplicates:
                raise DuplicateActionRouteError(path, owners[path], name)
            logger.warning(
                "action_route_duplicated",
                extra={"path": path, "event": name, "shadowed_by": owners[path]},
            )
        else:
            owners[path] = name

        logger.debug(
            "event_action_exposed",
            extra={
                "event": name,
                "action": action.name,
                "method": ACTION_METHOD,
                "path": path,
            },
        )
        routes.append(ActionRoute(path=path, descriptor=descriptor, action=action))

    return routes
