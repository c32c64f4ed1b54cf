"""Process-wide configuration read from the environment.

A `.env` file is loaded by `main.py` before `Settings.from_env()` is called,
so values can come from either source.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.3


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class Settings:
    """Configuration for the analysis gateway and report rendering.

    Attributes:
        api_key: Bearer credential for the model gateway; None when unset.
        base_url: OpenAI-compatible endpoint root.
        model: Model id sent with every request.
        temperature: Sampling temperature, kept low for repeatable output.
        report_font_path: Optional TrueType font used when rasterizing reports.
        log_level: Root logging level name.
    """

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    report_font_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Raises:
            RuntimeError: If AI_TEMPERATURE is set but is not a number.
        """
        raw_temperature = _optional("AI_TEMPERATURE")
        try:
            temperature = float(raw_temperature) if raw_temperature else DEFAULT_TEMPERATURE
        except ValueError as exc:
            raise RuntimeError(f"AI_TEMPERATURE={raw_temperature!r} is not a number.") from exc

        return cls(
            api_key=_optional("AI_GATEWAY_API_KEY") or _optional("LOVABLE_API_KEY"),
            base_url=_optional("AI_GATEWAY_BASE_URL") or DEFAULT_BASE_URL,
            model=_optional("AI_MODEL") or DEFAULT_MODEL,
            temperature=temperature,
            report_font_path=_optional("REPORT_FONT_PATH"),
            log_level=(_optional("LOG_LEVEL") or "INFO").upper(),
        )
