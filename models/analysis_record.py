"""Structured plant disease diagnosis and the image it was produced from."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

Severity = Literal["low", "moderate", "high", "critical"]
SpreadRate = Literal["low", "moderate", "high"]


class AnalysisRecord(BaseModel):
    """Validated diagnosis returned by the analysis model.

    Values of the wrong type are rejected, never coerced: a reply with
    `"confidence": "87"` is not a valid record.
    List fields keep the order the model produced them in, which is also the
    order they are displayed in.
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    disease_name: StrictStr
    scientific_name: StrictStr
    confidence: StrictInt = Field(ge=0, le=100)
    severity: Severity
    description: StrictStr
    symptoms: List[StrictStr]
    causes: List[StrictStr]
    treatment: List[StrictStr]
    prevention: List[StrictStr]
    affected_parts: List[StrictStr]
    spread_rate: SpreadRate

    def to_payload(self) -> Dict[str, Any]:
        """Return the camelCase dictionary served to API callers."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class SourceImage:
    """Opaque handle on the uploaded plant photo.

    Attributes:
        data: Raw image bytes as uploaded.
        mime_type: MIME type reported for the upload (e.g. image/jpeg).
    """

    data: bytes
    mime_type: str = "image/jpeg"

    def to_data_url(self) -> str:
        """Return the image as a base64 data URL for vision input."""
        encoded = base64.b64encode(self.data).decode("utf-8")
        return f"data:{self.mime_type};base64,{encoded}"
