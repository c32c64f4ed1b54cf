"""Report session lifecycle helpers."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import Request
from fastapi.responses import Response

from controllers.analysis_controller import get_analysis_client
from models.analysis_record import SourceImage
from services.report.report_exporter import ReportExporter, export_session, report_filename
from services.report.report_session import ReportSession
from services.report.session_store import SessionStore


def _view(session: ReportSession) -> Dict[str, Any]:
	return {
		"sessionId": session.session_id,
		"language": session.language,
		"record": session.record.to_payload(),
	}


async def start_session(request: Request, image: SourceImage, language: str) -> Dict[str, Any]:
	"""Analyze the image and register a new report session for it."""
	store: SessionStore = request.app.state.session_store
	session = await ReportSession.start(get_analysis_client(request), image, language)
	store.add(session)
	return _view(session)


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return the report currently held by a session."""
	store: SessionStore = request.app.state.session_store
	return _view(store.get(session_id))


async def change_language(request: Request, session_id: str, language: str) -> Dict[str, Any]:
	"""Re-analyze the session's image in another language."""
	store: SessionStore = request.app.state.session_store
	session = store.get(session_id)
	await session.reanalyze(language)
	return _view(session)


async def close_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Discard a session at the end of its workflow."""
	store: SessionStore = request.app.state.session_store
	store.delete(session_id)
	return {"sessionId": session_id, "closed": True}


async def export_report(request: Request, session_id: str) -> Response:
	"""Return the held report as a PDF download."""
	store: SessionStore = request.app.state.session_store
	session = store.get(session_id)
	pdf_bytes = await export_session(session, request.app.state.report_renderer, ReportExporter())
	return Response(
		content=pdf_bytes,
		media_type="application/pdf",
		headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'},
	)
