"""FastAPI routes for report sessions and PDF export."""

from fastapi import APIRouter, File, Form, Request, UploadFile
from pydantic import BaseModel

from controllers.errors import error_response
from controllers.session_controller import (
	change_language,
	close_session,
	export_report,
	get_session,
	start_session,
)
from models.languages import DEFAULT_LANGUAGE
from utils.media_validation import read_image_upload

router = APIRouter(prefix="/sessions", tags=["sessions"])


class LanguagePayload(BaseModel):
	language: str


@router.post("")
async def start_session_route(request: Request, image: UploadFile = File(...), language: str = Form(DEFAULT_LANGUAGE)):
	try:
		source = await read_image_upload(image)
		return await start_session(request, source, language)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return error_response(exc)


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return error_response(exc)


@router.put("/{session_id}/language")
async def change_language_route(request: Request, session_id: str, payload: LanguagePayload):
	"""Re-analyze in another language; on failure the held report is unchanged."""
	try:
		return await change_language(request, session_id, payload.language)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return error_response(exc)


@router.get("/{session_id}/report.pdf")
async def export_report_route(request: Request, session_id: str):
	try:
		return await export_report(request, session_id)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return error_response(exc)


@router.delete("/{session_id}")
async def close_session_route(request: Request, session_id: str):
	try:
		return await close_session(request, session_id)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return error_response(exc)
