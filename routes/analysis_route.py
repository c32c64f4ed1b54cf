"""FastAPI route for single-shot plant disease analysis."""

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from controllers.analysis_controller import analyze_plant
from controllers.errors import error_response
from models.languages import DEFAULT_LANGUAGE

router = APIRouter(tags=["analysis"])


class AnalyzePayload(BaseModel):
    image_data: str = Field(alias="imageData")
    language: str = DEFAULT_LANGUAGE


@router.post("/analyze-plant-disease", summary="Diagnose a plant photo")
async def analyze_plant_route(request: Request, payload: AnalyzePayload):
    """Return the diagnosis record, or `{error}` with 400/402/429/500."""
    try:
        return await analyze_plant(request, payload.image_data, payload.language)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        return error_response(exc)
