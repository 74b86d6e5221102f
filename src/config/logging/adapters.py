"""Logger com campos vinculados (child logger).

Uso:
    logger = bind_logger(logging.getLogger(__name__), request_id="abc")
    logger.info("event_created", extra={"event_id": "e1"})
    # record contém request_id="abc" e event_id="e1"

    child = logger.child(action="doThing")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any


class BoundLogger(logging.LoggerAdapter):
    """LoggerAdapter que mescla campos vinculados com o `extra` da chamada.

    O LoggerAdapter padrão substitui o `extra` da chamada; aqui os campos
    da chamada prevalecem sobre os vinculados.
    """

    def __init__(self, logger: logging.Logger, fields: Mapping[str, Any] | None = None) -> None:
        super().__init__(logger, dict(fields or {}))

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self.extra or {})

    def child(self, **fields: Any) -> BoundLogger:
        """Retorna novo logger com os campos atuais acrescidos de `fields`."""
        return BoundLogger(self.logger, {**self.fields, **fields})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.fields, **(kwargs.get("extra") or {})}
        return msg, kwargs


def bind_logger(logger: logging.Logger | BoundLogger, **fields: Any) -> BoundLogger:
    """Vincula `fields` a um logger (ou estende um BoundLogger existente)."""
    if isinstance(logger, BoundLogger):
        return logger.child(**fields)
    return BoundLogger(logger, fields)
