"""Testes da decodificação do body JSON e do interceptor."""

from __future__ import annotations

import gzip
import logging
import zlib

import pytest
from fastapi.testclient import TestClient

from api.middleware.json_body import (
    BodyDecodeError,
    JsonBodyMiddleware,
    create_inflater,
    decode_json_body,
    intercept_body_error,
    is_json_content_type,
    parse_content_type,
)
from app.app import create_app
from app.observability import RequestContext, reset_request_context, set_request_context
from config.settings import RestSettings
from tests.fakes.fake_events import RecordingProcessor, build_events
from utils.errors import BadRequestError, PayloadTooLargeError, UnsupportedMediaTypeError


def _client(processor: RecordingProcessor, **settings_overrides) -> TestClient:
    app = create_app(build_events(), processor, settings=RestSettings(**settings_overrides))
    return TestClient(app)


def _post_encoded(client: TestClient, body: bytes, encoding: str):
    return client.post(
        "/do-thing",
        content=body,
        headers={"content-type": "application/json", "content-encoding": encoding},
    )


class TestContentType:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("application/json", ("application/json", None)),
            ("Application/JSON; charset=UTF-8", ("application/json", "utf-8")),
            ('application/json; charset="utf-16"', ("application/json", "utf-16")),
            ("", ("", None)),
        ],
    )
    def test_parse_content_type(self, header: str, expected: tuple[str, str | None]) -> None:
        assert parse_content_type(header) == expected

    @pytest.mark.parametrize(
        ("mime", "expected"),
        [
            ("application/json", True),
            ("application/vnd.api+json", True),
            ("text/plain", False),
            ("application/x-www-form-urlencoded", False),
            ("", False),
        ],
    )
    def test_is_json_content_type(self, mime: str, expected: bool) -> None:
        assert is_json_content_type(mime) is expected


class TestDecodeJsonBody:
    def test_object(self) -> None:
        assert decode_json_body(b'{"target": "x"}') == {"target": "x"}

    def test_array(self) -> None:
        assert decode_json_body(b"[1, 2]") == [1, 2]

    def test_empty_body_is_empty_object(self) -> None:
        assert decode_json_body(b"") == {}

    def test_leading_whitespace_and_bom(self) -> None:
        assert decode_json_body('\ufeff  {"a": 1}'.encode()) == {"a": 1}

    def test_utf16_charset(self) -> None:
        assert decode_json_body('{"a": "é"}'.encode("utf-16"), "utf-16") == {"a": "é"}

    def test_malformed_json(self) -> None:
        with pytest.raises(BodyDecodeError) as exc_info:
            decode_json_body(b'{"target": ')
        assert exc_info.value.status == 400
        assert exc_info.value.message.startswith("invalid JSON body: Expecting value")

    @pytest.mark.parametrize("raw", [b'"just a string"', b"42", b"true", b"null", b"   "])
    def test_strict_mode_rejects_primitives(self, raw: bytes) -> None:
        with pytest.raises(BodyDecodeError) as exc_info:
            decode_json_body(raw)
        assert exc_info.value.status == 400

    def test_invalid_utf8(self) -> None:
        with pytest.raises(BodyDecodeError) as exc_info:
            decode_json_body(b'{"a": "\xff"}')
        assert exc_info.value.status == 400

    @pytest.mark.parametrize("charset", ["latin-1", "utf-99"])
    def test_unsupported_charset(self, charset: str) -> None:
        with pytest.raises(BodyDecodeError) as exc_info:
            decode_json_body(b"{}", charset)
        assert exc_info.value.status == 415


class TestInterceptBodyError:
    def test_parse_fault_becomes_bad_request(self) -> None:
        error = intercept_body_error(BodyDecodeError(400, "invalid JSON body: boom"))
        assert isinstance(error, BadRequestError)
        assert error.client_message == "invalid JSON body: boom"

    def test_size_fault_becomes_payload_too_large(self) -> None:
        error = intercept_body_error(BodyDecodeError(413, "request entity too large"))
        assert isinstance(error, PayloadTooLargeError)
        assert error.http_status == 413

    def test_charset_fault_becomes_unsupported_media_type(self) -> None:
        error = intercept_body_error(BodyDecodeError(415, 'unsupported charset "LATIN-1"'))
        assert isinstance(error, UnsupportedMediaTypeError)


class TestCreateInflater:
    @pytest.mark.parametrize("encoding", ["", "identity"])
    def test_identity_has_no_inflater(self, encoding: str) -> None:
        assert create_inflater(encoding) is None

    def test_gzip_inflater(self) -> None:
        inflater = create_inflater("gzip")
        assert inflater.decompress(gzip.compress(b'{"a": 1}')) == b'{"a": 1}'

    def test_deflate_inflater(self) -> None:
        inflater = create_inflater("deflate")
        assert inflater.decompress(zlib.compress(b"[1]")) == b"[1]"

    @pytest.mark.parametrize("encoding", ["br", "compress", "gzip, br"])
    def test_unknown_encoding_is_415(self, encoding: str) -> None:
        with pytest.raises(BodyDecodeError) as exc_info:
            create_inflater(encoding)
        assert exc_info.value.status == 415
        assert exc_info.value.message == f'unsupported content encoding "{encoding}"'


class TestContentEncoding:
    def test_gzip_body_is_inflated(self) -> None:
        processor = RecordingProcessor(result="ok")
        client = _client(processor)

        response = _post_encoded(client, gzip.compress(b'{"target":"x"}'), "gzip")

        assert response.status_code == 200
        assert processor.events[0].target == "x"

    def test_deflate_body_is_inflated(self) -> None:
        processor = RecordingProcessor(result="ok")
        client = _client(processor)

        response = _post_encoded(client, zlib.compress(b'{"target":"y","count":2}'), "deflate")

        assert response.status_code == 200
        assert (processor.events[0].target, processor.events[0].count) == ("y", 2)

    def test_encoding_header_is_case_insensitive(self) -> None:
        client = _client(RecordingProcessor(result="ok"))
        response = _post_encoded(client, gzip.compress(b'{"target":"x"}'), "GZip")
        assert response.status_code == 200

    def test_identity_encoding(self) -> None:
        client = _client(RecordingProcessor(result="ok"))
        response = _post_encoded(client, b'{"target":"x"}', "identity")
        assert response.status_code == 200

    def test_unsupported_encoding_is_415(self) -> None:
        processor = RecordingProcessor()
        client = _client(processor)

        response = _post_encoded(client, b'{"target":"x"}', "br")

        assert response.status_code == 415
        assert response.json() == {
            "success": False,
            "message": 'unsupported content encoding "br"',
        }
        assert processor.events == []

    def test_limit_applies_to_inflated_size(self) -> None:
        compressed = gzip.compress(b'{"target":"' + b"x" * 1000 + b'"}')
        assert len(compressed) < 64
        client = _client(RecordingProcessor(), body_limit_bytes=64)

        response = _post_encoded(client, compressed, "gzip")

        assert response.status_code == 413
        assert response.json() == {"success": False, "message": "request entity too large"}

    def test_truncated_gzip_is_400(self) -> None:
        client = _client(RecordingProcessor())

        response = _post_encoded(client, gzip.compress(b'{"target":"x"}')[:-8], "gzip")

        assert response.status_code == 400
        assert response.json()["message"] == "invalid gzip body: unexpected end of file"

    def test_corrupt_deflate_is_400(self) -> None:
        client = _client(RecordingProcessor())
        response = _post_encoded(client, b"not deflate at all", "deflate")
        assert response.status_code == 400
        assert response.json()["message"].startswith("invalid deflate body:")


@pytest.mark.asyncio
async def test_gzip_body_split_across_messages_is_inflated() -> None:
    compressed = gzip.compress(b'{"target": "chunked"}')
    messages = [
        {"type": "http.request", "body": compressed[:10], "more_body": True},
        {"type": "http.request", "body": compressed[10:], "more_body": False},
    ]
    seen: list[bytes] = []

    async def receive():
        return messages.pop(0)

    async def downstream(scope, receive, send) -> None:
        message = await receive()
        seen.append(message["body"])

    scope = {
        "type": "http",
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-encoding", b"gzip"),
        ],
    }

    context = RequestContext.start(logging.getLogger("test.json_body"))
    token = set_request_context(context)
    try:
        await JsonBodyMiddleware(downstream, limit_bytes=1024)(scope, receive, None)
    finally:
        reset_request_context(token)

    assert context.body == {"target": "chunked"}
    assert seen == [compressed]
