"""Testes end-to-end das rotas de action derivadas do registro."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.app import create_app
from config.settings import RestSettings
from tests.fakes.fake_events import DoThing, RecordingProcessor, build_events
from utils.errors import GENERIC_SERVER_MESSAGE, NotFoundError, ServiceUnavailableError


def _client(processor, **settings_overrides) -> TestClient:
    app = create_app(build_events(), processor, settings=RestSettings(**settings_overrides))
    return TestClient(app)


class TestRouteExposure:
    def test_action_reachable_at_derived_path(self) -> None:
        client = _client(RecordingProcessor(result="ok"))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.status_code == 200

    def test_action_reachable_at_explicit_path(self) -> None:
        client = _client(RecordingProcessor(result="ok"))
        response = client.post("/custom", json={})
        assert response.status_code == 200
        assert response.json() == {"success": True, "result": "ok"}

    def test_event_without_action_has_no_route(self) -> None:
        client = _client(RecordingProcessor())
        for path in ("/audit-trail-written", "/AuditTrailWritten"):
            response = client.post(path, json={})
            assert response.status_code == 404
            assert response.json() == {"success": False, "message": "Not Found"}

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
    def test_action_only_accepts_post(self, method: str) -> None:
        client = _client(RecordingProcessor())
        response = client.request(method, "/do-thing")
        assert response.status_code == 405
        assert response.json() == {"success": False, "message": "Method Not Allowed"}
        assert response.headers["allow"] == "POST"


class TestActionSuccess:
    def test_result_is_wrapped_verbatim(self) -> None:
        result = {"invoice": {"id": "inv-1", "lines": [1, 2, 3]}, "total": 12.5}
        processor = AsyncMock(return_value=result)
        client = _client(processor)

        response = client.post("/do-thing", json={"target": "x", "count": 2})

        assert response.status_code == 200
        assert response.json() == {"success": True, "result": result}

    def test_body_is_sole_constructor_input(self) -> None:
        processor = RecordingProcessor(result=None)
        client = _client(processor)

        client.post("/do-thing", json={"target": "warehouse", "count": 3})

        assert len(processor.events) == 1
        event = processor.events[0]
        assert isinstance(event, DoThing)
        assert (event.target, event.count) == ("warehouse", 3)

    def test_null_result(self) -> None:
        client = _client(RecordingProcessor(result=None))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.json() == {"success": True, "result": None}

    def test_event_created_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("INFO")
        processor = RecordingProcessor(result=1)
        client = _client(processor)

        client.post("/do-thing", json={"target": "x"})

        record = next(r for r in caplog.records if r.getMessage() == "event_created")
        assert record.event_id == processor.events[0].id
        assert record.event == "DoThing"


class TestActionFailures:
    def test_malformed_json_is_400(self) -> None:
        processor = RecordingProcessor()
        client = _client(processor)

        response = client.post(
            "/do-thing",
            content=b'{"target": ',
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("invalid JSON body:")
        assert processor.events == []

    @pytest.mark.parametrize(
        ("method", "path"),
        [("POST", "/custom"), ("GET", "/health"), ("POST", "/nowhere")],
    )
    def test_malformed_json_is_400_on_any_route(self, method: str, path: str) -> None:
        client = _client(RecordingProcessor())
        response = client.request(
            method,
            path,
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_body_over_limit_is_413(self) -> None:
        client = _client(RecordingProcessor(), body_limit_bytes=32)
        response = client.post("/do-thing", json={"target": "x" * 64})
        assert response.status_code == 413
        assert response.json() == {"success": False, "message": "request entity too large"}

    def test_constructor_validation_failure_is_400(self) -> None:
        processor = RecordingProcessor()
        client = _client(processor)

        response = client.post("/do-thing", json={"count": "many"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("invalid event payload:")
        assert "target" in body["message"]
        assert processor.events == []

    def test_array_body_is_rejected_by_constructor(self) -> None:
        client = _client(RecordingProcessor())
        response = client.post("/do-thing", json=[{"target": "x"}])
        assert response.status_code == 400

    def test_non_json_body_reaches_constructor_as_empty_object(self) -> None:
        processor = RecordingProcessor(result="ok")
        client = _client(processor)

        response = client.post("/custom", content=b"report_id=1", headers={"content-type": "text/plain"})

        assert response.status_code == 200
        assert processor.events[0].report_id is None

    def test_rejection_with_client_status_returns_own_message(self) -> None:
        client = _client(RecordingProcessor(error=NotFoundError("thing x not found")))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "thing x not found"}

    def test_http_exception_from_processor_keeps_status(self) -> None:
        client = _client(RecordingProcessor(error=HTTPException(status_code=404, detail="nope")))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "nope"}

    def test_untyped_rejection_is_500_generic(self) -> None:
        client = _client(RecordingProcessor(error=RuntimeError("db password=hunter2")))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": GENERIC_SERVER_MESSAGE}
        assert "hunter2" not in response.text

    def test_server_rejection_with_safe_message(self) -> None:
        error = ServiceUnavailableError("broker down", safe_message="retry later")
        client = _client(RecordingProcessor(error=error))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.status_code == 503
        assert response.json() == {"success": False, "message": "retry later"}

    def test_unserializable_result_is_500(self) -> None:
        client = _client(RecordingProcessor(result=object()))
        response = client.post("/do-thing", json={"target": "x"})
        assert response.status_code == 500
        assert response.json()["success"] is False


class TestCors:
    def test_any_origin_allowed(self) -> None:
        client = _client(RecordingProcessor(result="ok"))
        response = client.post(
            "/do-thing",
            json={"target": "x"},
            headers={"origin": "https://anywhere.example"},
        )
        assert response.headers["access-control-allow-origin"] == "*"

    def test_preflight(self) -> None:
        client = _client(RecordingProcessor())
        response = client.options(
            "/do-thing",
            headers={
                "origin": "https://anywhere.example",
                "access-control-request-method": "POST",
            },
        )
        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_error_responses_carry_cors_headers(self) -> None:
        client = _client(RecordingProcessor())
        response = client.post(
            "/do-thing",
            content=b"{",
            headers={"content-type": "application/json", "origin": "https://a.example"},
        )
        assert response.status_code == 400
        assert response.headers["access-control-allow-origin"] == "*"
