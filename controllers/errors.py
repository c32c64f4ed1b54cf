"""Translate domain failures into `{"error": ...}` JSON responses."""

import logging
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import JSONResponse

from models.languages import UnknownLanguageError
from services.openai.errors import AnalysisError
from services.report.report_exporter import ReportExportError
from services.report.report_session import SessionBusyError
from services.report.session_store import SessionNotFoundError

LOGGER = logging.getLogger(__name__)


def error_response(exc: Exception) -> JSONResponse:
    """Return the boundary response for `exc`.

    Analysis failures keep their own status (429, 402, else 500); input
    problems are 400, unknown sessions 404, and busy sessions 409.
    """
    if isinstance(exc, AnalysisError):
        if exc.status_code == 500:
            LOGGER.error("Analysis failed (%s): %s", exc.kind.value, exc.detail)
        return _json(exc.status_code, exc.user_message, kind=exc.kind.value)
    if isinstance(exc, SessionNotFoundError):
        return _json(404, exc.args[0])
    if isinstance(exc, SessionBusyError):
        return _json(409, str(exc))
    if isinstance(exc, (UnknownLanguageError, ValueError)):
        return _json(400, str(exc))
    if isinstance(exc, HTTPException):
        return _json(exc.status_code, str(exc.detail))
    if isinstance(exc, ReportExportError):
        LOGGER.error("Report export failed: %s", exc)
        return _json(500, "Failed to generate the PDF report.")

    LOGGER.exception("Unexpected error while handling request")
    return _json(500, "Unknown error occurred")


def _json(status_code: int, message: str, kind: Optional[str] = None) -> JSONResponse:
    body = {"error": message}
    if kind:
        body["kind"] = kind
    return JSONResponse(status_code=status_code, content=body)
