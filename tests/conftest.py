"""
Shared pytest fixtures for the plant diagnosis tests.

Provides:
- A valid diagnosis payload and record
- A small PNG source image
- A scripted fake analyzer standing in for the model client
"""

import asyncio
import io
from typing import Any, Dict, List, Optional, Tuple

import pytest
from PIL import Image

from models.analysis_record import AnalysisRecord, SourceImage


def make_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "diseaseName": "Leaf Blight",
        "scientificName": "Alternaria solani",
        "confidence": 87,
        "severity": "high",
        "description": "Fungal disease producing concentric brown lesions on older leaves.",
        "symptoms": ["Brown spots with rings", "Yellowing around lesions", "Leaf drop"],
        "causes": ["Alternaria fungus", "Warm humid weather"],
        "treatment": ["Remove infected leaves", "Apply copper fungicide", "Improve airflow"],
        "prevention": ["Crop rotation", "Drip irrigation"],
        "affectedParts": ["leaves", "stems"],
        "spreadRate": "moderate",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def record_payload() -> Dict[str, Any]:
    return make_payload()


@pytest.fixture
def record(record_payload) -> AnalysisRecord:
    return AnalysisRecord.model_validate(record_payload)


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), (40, 140, 60)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def source_image(png_bytes) -> SourceImage:
    return SourceImage(data=png_bytes, mime_type="image/png")


class FakeAnalyzer:
    """Scripted stand-in for PlantAnalysisClient.

    Each call pops the next scripted outcome: an AnalysisRecord is returned,
    an exception is raised. When `gate` is set, calls wait on it first.
    """

    configured = True

    def __init__(self, outcomes: Optional[List[Any]] = None, gate: Optional[asyncio.Event] = None) -> None:
        self.outcomes = list(outcomes or [])
        self.gate = gate
        self.calls: List[Tuple[SourceImage, str]] = []

    async def analyze(self, image: SourceImage, language: str) -> AnalysisRecord:
        self.calls.append((image, language))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
