"""Hierarquia de erros do serviço.

Cada erro declara explicitamente como deve ser exposto via HTTP:
- kind: categoria estável ("bad_request", "internal", ...)
- http_status: status HTTP da resposta
- client_message: texto seguro para o cliente
- internal_detail: detalhe completo, só para logs

Erros de cliente (4xx) devolvem a própria mensagem.
Erros de servidor (5xx) nunca vazam detalhe interno: usam `safe_message`
quando informado, senão GENERIC_SERVER_MESSAGE.
"""

from __future__ import annotations

GENERIC_SERVER_MESSAGE = "unexpected server error"


class ServiceError(Exception):
    """Base de todos os erros renderizáveis como envelope HTTP."""

    kind: str = "internal"
    http_status: int = 500

    def __init__(
        self,
        message: str = "",
        *,
        safe_message: str | None = None,
        internal_detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.safe_message = safe_message
        self.internal_detail = internal_detail or message

    @property
    def is_client_fault(self) -> bool:
        """True para status na faixa [400, 500)."""
        return 400 <= self.http_status < 500

    @property
    def client_message(self) -> str:
        if self.is_client_fault:
            return self.message
        return self.safe_message or GENERIC_SERVER_MESSAGE

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.http_status}, message={self.message!r})"


class ClientError(ServiceError):
    """Falha atribuída ao cliente; mensagem é segura para retorno."""

    kind = "client_error"
    http_status = 400


class BadRequestError(ClientError):
    kind = "bad_request"
    http_status = 400


class NotFoundError(ClientError):
    kind = "not_found"
    http_status = 404


class MethodNotAllowedError(ClientError):
    kind = "method_not_allowed"
    http_status = 405


class ConflictError(ClientError):
    kind = "conflict"
    http_status = 409


class PayloadTooLargeError(ClientError):
    kind = "payload_too_large"
    http_status = 413


class UnsupportedMediaTypeError(ClientError):
    kind = "unsupported_media_type"
    http_status = 415


class UnprocessableEntityError(ClientError):
    kind = "unprocessable_entity"
    http_status = 422


class ServerError(ServiceError):
    """Falha inesperada do servidor; detalhe suprimido do cliente."""

    kind = "internal"
    http_status = 500


class InternalServerError(ServerError):
    kind = "internal"
    http_status = 500


class ServiceUnavailableError(ServerError):
    kind = "service_unavailable"
    http_status = 503


# Erros de startup (nunca renderizados ao cliente)


class DuplicateEventError(ValueError):
    """Mesmo nome de evento registrado duas vezes."""


class DuplicateActionRouteError(ValueError):
    """Dois eventos derivaram o mesmo path de action."""

    def __init__(self, path: str, first_event: str, second_event: str) -> None:
        super().__init__(
            f"Path de action duplicado {path}: eventos {first_event!r} e {second_event!r}"
        )
        self.path = path
        self.first_event = first_event
        self.second_event = second_event


_ERRORS_BY_STATUS: dict[int, type[ServiceError]] = {
    400: BadRequestError,
    404: NotFoundError,
    405: MethodNotAllowedError,
    409: ConflictError,
    413: PayloadTooLargeError,
    415: UnsupportedMediaTypeError,
    422: UnprocessableEntityError,
    500: InternalServerError,
    503: ServiceUnavailableError,
}


def error_for_status(status: int, message: str) -> ServiceError:
    """Cria o erro tipado correspondente a um status HTTP.

    Status sem classe dedicada caem em ClientError/ServerError genéricos,
    preservando o status original.
    """
    error_cls = _ERRORS_BY_STATUS.get(status)
    if error_cls is not None:
        return error_cls(message)

    base_cls: type[ServiceError] = ClientError if 400 <= status < 500 else ServerError
    error = base_cls(message)
    error.http_status = status
    return error
