"""Decodificação do body JSON + interceptor de falhas de parse.

Roda depois do CORS e antes do roteamento, para qualquer rota. Só
decodifica requests com content-type application/json (ou */*+json):
- Content-Encoding gzip/deflate → descomprimido; outro encoding → 415
- body vazio → {}
- acima do limite (medido após descompressão) → 413
- charset não suportado → 415
- UTF inválido, JSON malformado ou top-level que não seja objeto/array → 400

O decoder levanta BodyDecodeError; o interceptor converte em erro de
cliente tipado e responde via normalizador, encerrando o pipeline. Em
caso de sucesso o valor vai para RequestContext.body e o body bruto é
repassado intacto para o app interno.
"""

from __future__ import annotations

import codecs
import json
import logging
import zlib
from typing import TYPE_CHECKING, Any

from starlette.datastructures import Headers

from api.middleware.errors import render_error
from app.observability import get_current_request_context
from config.settings import DEFAULT_BODY_LIMIT_BYTES
from utils.errors import (
    BadRequestError,
    ClientError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

IDENTITY_ENCODINGS = frozenset({"", "identity"})


class BodyDecodeError(ValueError):
    """Falha ao ler/decodificar o body JSON (status 400, 413 ou 415)."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class _ClientDisconnected(Exception):
    pass


def parse_content_type(value: str) -> tuple[str, str | None]:
    """Separa mime type e charset de um header Content-Type."""
    mime, _, raw_params = value.partition(";")
    charset = None
    for param in raw_params.split(";"):
        key, _, param_value = param.strip().partition("=")
        if key.lower() == "charset" and param_value:
            charset = param_value.strip().strip('"').lower()
    return mime.strip().lower(), charset


def is_json_content_type(mime: str) -> bool:
    return mime == "application/json" or (mime.count("/") == 1 and mime.endswith("+json"))


def create_inflater(encoding: str) -> Any | None:
    """Descompressor zlib para o Content-Encoding (None = sem compressão).

    Raises:
        BodyDecodeError: 415 para encoding não suportado.
    """
    if encoding in IDENTITY_ENCODINGS:
        return None
    if encoding == "gzip":
        return zlib.decompressobj(16 + zlib.MAX_WBITS)
    if encoding == "deflate":
        return zlib.decompressobj()
    raise BodyDecodeError(415, f'unsupported content encoding "{encoding}"')


def decode_json_body(raw: bytes, charset: str | None = None) -> Any:
    """Decodifica o body em modo estrito.

    Raises:
        BodyDecodeError: 415 para charset não suportado, 400 para o resto.
    """
    encoding = charset or "utf-8"
    if not (encoding.startswith("utf-") or encoding == "utf8"):
        raise BodyDecodeError(415, f'unsupported charset "{encoding.upper()}"')
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise BodyDecodeError(415, f'unsupported charset "{encoding.upper()}"') from exc

    if not raw:
        return {}

    try:
        text = raw.decode(encoding).lstrip("\ufeff")
    except UnicodeDecodeError as exc:
        raise BodyDecodeError(400, f"invalid {encoding} body: {exc.reason}") from exc

    first_char = text.lstrip()[:1]
    if first_char not in ("{", "["):
        raise BodyDecodeError(400, "invalid JSON body: expected object or array at top level")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise BodyDecodeError(
            400,
            f"invalid JSON body: {exc.msg} (line {exc.lineno} column {exc.colno})",
        ) from exc


def intercept_body_error(exc: BodyDecodeError) -> ClientError:
    """Reclassifica a falha de parse como erro de cliente tipado."""
    if exc.status == 413:
        return PayloadTooLargeError(exc.message)
    if exc.status == 415:
        return UnsupportedMediaTypeError(exc.message)
    return BadRequestError(exc.message)


class JsonBodyMiddleware:
    """Middleware ASGI puro de decodificação do body JSON."""

    def __init__(self, app: ASGIApp, limit_bytes: int = DEFAULT_BODY_LIMIT_BYTES) -> None:
        self.app = app
        self.limit_bytes = limit_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        mime, charset = parse_content_type(headers.get("content-type", ""))
        if not is_json_content_type(mime):
            await self.app(scope, receive, send)
            return

        try:
            raw, content = await self._read_body(headers, receive)
            payload = decode_json_body(content, charset)
        except _ClientDisconnected:
            logger.info("client_disconnected_during_body_read")
            return
        except BodyDecodeError as exc:
            response = render_error(intercept_body_error(exc), get_current_request_context())
            await response(scope, receive, send)
            return

        context = get_current_request_context()
        if context is not None:
            context.body = payload

        await self.app(scope, _replay(raw, receive), send)

    async def _read_body(self, headers: Headers, receive: Receive) -> tuple[bytes, bytes]:
        """Lê o body inteiro.

        Returns:
            (bytes recebidos, bytes descomprimidos); iguais sem Content-Encoding.
        """
        encoding = headers.get("content-encoding", "identity").strip().lower()
        inflater = create_inflater(encoding)

        declared = headers.get("content-length")
        if (
            inflater is None
            and declared is not None
            and declared.isdigit()
            and int(declared) > self.limit_bytes
        ):
            raise BodyDecodeError(413, "request entity too large")

        raw_chunks: list[bytes] = []
        content_chunks: list[bytes] = []
        size = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                raise _ClientDisconnected
            chunk = message.get("body", b"")
            raw_chunks.append(chunk)
            if inflater is not None:
                chunk = self._inflate(inflater, encoding, chunk, size)
            size += len(chunk)
            if size > self.limit_bytes:
                raise BodyDecodeError(413, "request entity too large")
            content_chunks.append(chunk)
            if not message.get("more_body", False):
                break

        raw = b"".join(raw_chunks)
        if inflater is None:
            return raw, raw
        if raw and not inflater.eof:
            raise BodyDecodeError(400, f"invalid {encoding} body: unexpected end of file")
        return raw, b"".join(content_chunks)

    def _inflate(self, inflater: Any, encoding: str, data: bytes, size: int) -> bytes:
        # Saída limitada a um byte além do restante: estourar já implica 413
        try:
            return inflater.decompress(data, self.limit_bytes - size + 1)
        except zlib.error as exc:
            raise BodyDecodeError(400, f"invalid {encoding} body: {exc}") from exc


def _replay(raw: bytes, receive: Receive) -> Receive:
    """Receive que entrega o body já lido e depois delega ao original."""
    delivered = False

    async def replay_receive() -> Message:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": raw, "more_body": False}
        return await receive()

    return replay_receive
