"""Helpers to recover an AnalysisRecord from free-form model replies.

The model is asked for JSON but is not forced to produce it, so a reply may
be bare JSON, JSON in a markdown fence, or JSON surrounded by prose. The
strategies below are tried in order and the first candidate that both parses
and validates wins.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Optional, Tuple

from pydantic import ValidationError

from models.analysis_record import AnalysisRecord
from services.openai.errors import UNRECOGNIZED_FORMAT, ParseError

LOGGER = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def whole_text(raw_text: str) -> Optional[str]:
    """Use the entire reply as the candidate."""
    return raw_text


def fenced_block(raw_text: str) -> Optional[str]:
    """Return the interior of the first triple-backtick block, if any."""
    match = _FENCED_BLOCK.search(raw_text)
    return match.group(1) if match else None


def brace_span(raw_text: str) -> Optional[str]:
    """Return the span from the first '{' to the last '}', if any."""
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end <= start:
        return None
    return raw_text[start : end + 1]


STRATEGIES: Tuple[Tuple[str, Callable[[str], Optional[str]]], ...] = (
    ("whole-text", whole_text),
    ("fenced-block", fenced_block),
    ("brace-span", brace_span),
)


def _validate(candidate: str) -> AnalysisRecord:
    return AnalysisRecord.model_validate(json.loads(candidate))


def parse_analysis(raw_text: str) -> AnalysisRecord:
    """Return the first valid AnalysisRecord found in `raw_text`.

    Raises:
        ParseError: If every strategy fails to produce a valid record.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ParseError(UNRECOGNIZED_FORMAT)

    for name, extract in STRATEGIES:
        candidate = extract(raw_text)
        if candidate is None:
            continue
        try:
            record = _validate(candidate)
        except (ValueError, RecursionError, ValidationError) as exc:
            LOGGER.debug("Strategy %s rejected reply: %s", name, exc)
            continue
        LOGGER.debug("Analysis record extracted via %s", name)
        return record

    raise ParseError(UNRECOGNIZED_FORMAT)


def extract_message_content(completion: Any) -> Optional[str]:
    """Return the first choice's message text, or None when absent or blank."""
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if not isinstance(content, str) or not content.strip():
        return None
    return content


def extract_usage(completion: Any) -> dict:
    """Return token usage information from the completion, if present."""
    usage = getattr(completion, "usage", None)
    return {
        "input_tokens": getattr(usage, "prompt_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "completion_tokens", None) if usage else None,
    }
