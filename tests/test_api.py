"""Tests for the HTTP service boundary."""

import base64

import pytest
from fastapi.testclient import TestClient

from main import create_app
from models.analysis_record import AnalysisRecord
from services.openai.errors import AnalysisError, AnalysisErrorKind
from tests.conftest import FakeAnalyzer, make_payload
from utils.settings import Settings


@pytest.fixture
def app():
    return create_app(Settings(api_key=None))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def use_analyzer(app, outcomes):
    analyzer = FakeAnalyzer(outcomes)
    app.state.analysis_client = analyzer
    return analyzer


def data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("utf-8")


class TestCors:
    def test_preflight_is_empty_200(self, client):
        response = client.options(
            "/analyze-plant-disease",
            headers={"Origin": "https://frontend.example", "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "content-type" in response.headers["access-control-allow-headers"]

    def test_responses_carry_cors_headers(self, client):
        response = client.get("/languages")
        assert response.headers["access-control-allow-origin"] == "*"


class TestAnalyzeEndpoint:
    def test_success(self, app, client, record, record_payload, png_bytes):
        analyzer = use_analyzer(app, [record])
        response = client.post("/analyze-plant-disease", json={"imageData": data_url(png_bytes), "language": "hi"})
        assert response.status_code == 200
        assert response.json() == record_payload
        image, language = analyzer.calls[0]
        assert image.data == png_bytes
        assert image.mime_type == "image/png"
        assert language == "hi"

    def test_bare_base64_defaults_to_english(self, app, client, record, png_bytes):
        analyzer = use_analyzer(app, [record])
        response = client.post("/analyze-plant-disease", json={"imageData": base64.b64encode(png_bytes).decode()})
        assert response.status_code == 200
        assert analyzer.calls[0][1] == "en"

    @pytest.mark.parametrize(
        "kind,status",
        [
            (AnalysisErrorKind.RATE_LIMITED, 429),
            (AnalysisErrorKind.PAYMENT_REQUIRED, 402),
            (AnalysisErrorKind.UPSTREAM_FAILURE, 500),
            (AnalysisErrorKind.EMPTY_RESPONSE, 500),
            (AnalysisErrorKind.MALFORMED_RESPONSE, 500),
            (AnalysisErrorKind.CONFIGURATION, 500),
        ],
    )
    def test_error_status_mapping(self, app, client, png_bytes, kind, status):
        use_analyzer(app, [AnalysisError(kind)])
        response = client.post("/analyze-plant-disease", json={"imageData": data_url(png_bytes), "language": "en"})
        assert response.status_code == status
        body = response.json()
        assert body["error"]
        assert body["kind"] == kind.value

    def test_unconfigured_service(self, client, png_bytes):
        response = client.post("/analyze-plant-disease", json={"imageData": data_url(png_bytes), "language": "en"})
        assert response.status_code == 500
        assert response.json()["kind"] == "configuration"

    def test_unknown_language(self, client, png_bytes):
        response = client.post("/analyze-plant-disease", json={"imageData": data_url(png_bytes), "language": "fr"})
        assert response.status_code == 400
        assert "Unsupported language" in response.json()["error"]

    def test_invalid_image_data(self, client):
        response = client.post("/analyze-plant-disease", json={"imageData": "data:image/png;base64,@@@", "language": "en"})
        assert response.status_code == 400

    def test_missing_image_data(self, client):
        response = client.post("/analyze-plant-disease", json={"language": "en"})
        assert response.status_code == 400
        assert "error" in response.json()


class TestSessions:
    def _start(self, client, png_bytes, language="en"):
        return client.post(
            "/sessions",
            files={"image": ("leaf.png", png_bytes, "image/png")},
            data={"language": language},
        )

    def test_session_workflow(self, app, client, record, png_bytes):
        tamil = AnalysisRecord.model_validate(make_payload(diseaseName="இலை கருகல்"))
        analyzer = use_analyzer(app, [record, tamil])

        started = self._start(client, png_bytes)
        assert started.status_code == 200
        session_id = started.json()["sessionId"]
        assert started.json()["language"] == "en"

        same = client.put(f"/sessions/{session_id}/language", json={"language": "en"})
        assert same.status_code == 200
        assert len(analyzer.calls) == 1

        switched = client.put(f"/sessions/{session_id}/language", json={"language": "ta"})
        assert switched.status_code == 200
        assert switched.json()["language"] == "ta"
        assert switched.json()["record"]["diseaseName"] == "இலை கருகல்"
        assert analyzer.calls[1][1] == "ta"

        current = client.get(f"/sessions/{session_id}")
        assert current.json()["language"] == "ta"

        closed = client.delete(f"/sessions/{session_id}")
        assert closed.status_code == 200
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_failed_language_switch_keeps_report(self, app, client, record, record_payload, png_bytes):
        use_analyzer(app, [record, AnalysisError(AnalysisErrorKind.PAYMENT_REQUIRED)])
        session_id = self._start(client, png_bytes).json()["sessionId"]

        response = client.put(f"/sessions/{session_id}/language", json={"language": "bn"})
        assert response.status_code == 402

        current = client.get(f"/sessions/{session_id}").json()
        assert current["language"] == "en"
        assert current["record"] == record_payload

    def test_start_failure_creates_no_session(self, app, client, png_bytes):
        use_analyzer(app, [AnalysisError(AnalysisErrorKind.RATE_LIMITED)])
        response = self._start(client, png_bytes)
        assert response.status_code == 429
        assert len(app.state.session_store) == 0

    def test_non_image_upload_rejected(self, app, client):
        use_analyzer(app, [])
        response = client.post(
            "/sessions", files={"image": ("notes.txt", b"hello", "text/plain")}, data={"language": "en"}
        )
        assert response.status_code == 415

    def test_pdf_export(self, app, client, record, png_bytes):
        analyzer = use_analyzer(app, [record])
        session_id = self._start(client, png_bytes).json()["sessionId"]

        response = client.get(f"/sessions/{session_id}/report.pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "plant-disease-report-" in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")
        assert len(analyzer.calls) == 1

    def test_unknown_session(self, client):
        response = client.put("/sessions/missing/language", json={"language": "kn"})
        assert response.status_code == 404
        assert "missing" in response.json()["error"]


class TestMetadata:
    def test_languages(self, client):
        body = client.get("/languages").json()
        assert body["default"] == "en"
        codes = [entry["code"] for entry in body["languages"]]
        assert codes == ["en", "kn", "ta", "ml", "te", "hi", "bn", "mr", "gu"]
        assert body["languages"][1] == {"code": "kn", "name": "Kannada", "nativeName": "ಕನ್ನಡ"}

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["ok"] is True
        assert body["analysis_configured"] is False
