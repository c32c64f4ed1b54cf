"""Stateless plant analysis for the single-shot endpoint."""

from typing import Any, Dict

from fastapi import HTTPException, Request

from services.openai.analysis_client import PlantAnalysisClient
from utils.media_validation import decode_image_payload


def get_analysis_client(request: Request) -> PlantAnalysisClient:
    """Retrieve the shared analysis client from the app state."""
    client = getattr(request.app.state, "analysis_client", None)
    if client is None:
        raise HTTPException(status_code=500, detail="Analysis client not initialized.")
    return client


async def analyze_plant(request: Request, image_data: str, language: str) -> Dict[str, Any]:
    """Decode the uploaded image and return the diagnosis as a camelCase dict.

    Args:
        request: FastAPI Request (used to access app.state.analysis_client).
        image_data: Data URL or bare base64 image payload.
        language: Catalog code of the report language.

    Raises:
        ValueError: If the image payload or language is invalid.
        AnalysisError: If the analysis fails.
    """
    image = decode_image_payload(image_data)
    record = await get_analysis_client(request).analyze(image, language)
    return record.to_payload()
