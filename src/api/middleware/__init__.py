"""Middlewares do pipeline HTTP.

Ordem (mais externo primeiro):
- request_context: request_id, logger vinculado, logs de entrada/saída
- CORS (Starlette)
- json_body: decodificação do body + interceptor de falhas de parse

errors.py concentra a normalização de falhas em envelope JSON.
"""

from api.middleware.errors import (
    classify_error,
    register_error_handlers,
    render_error,
)
from api.middleware.json_body import BodyDecodeError, JsonBodyMiddleware, decode_json_body
from api.middleware.request_context import REQUEST_ID_HEADER, RequestContextMiddleware

__all__ = [
    "REQUEST_ID_HEADER",
    "BodyDecodeError",
    "JsonBodyMiddleware",
    "RequestContextMiddleware",
    "classify_error",
    "decode_json_body",
    "register_error_handlers",
    "render_error",
]
