"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    GENERIC_SERVER_MESSAGE,
    BadRequestError,
    ClientError,
    ConflictError,
    DuplicateActionRouteError,
    DuplicateEventError,
    InternalServerError,
    MethodNotAllowedError,
    NotFoundError,
    PayloadTooLargeError,
    ServerError,
    ServiceError,
    ServiceUnavailableError,
    UnprocessableEntityError,
    UnsupportedMediaTypeError,
    error_for_status,
)

__all__ = [
    "GENERIC_SERVER_MESSAGE",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "DuplicateActionRouteError",
    "DuplicateEventError",
    "InternalServerError",
    "MethodNotAllowedError",
    "NotFoundError",
    "PayloadTooLargeError",
    "ServerError",
    "ServiceError",
    "ServiceUnavailableError",
    "UnprocessableEntityError",
    "UnsupportedMediaTypeError",
    "error_for_status",
]
