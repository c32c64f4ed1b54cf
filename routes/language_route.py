from fastapi import APIRouter

from models.languages import DEFAULT_LANGUAGE, LANGUAGES

router = APIRouter(tags=["languages"])


@router.get("/languages")
async def list_languages():
    """Return the selectable report languages in display order."""
    return {"default": DEFAULT_LANGUAGE, "languages": [language.to_dict() for language in LANGUAGES]}
