"""Typed failures raised by the analysis pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional

UNRECOGNIZED_FORMAT = "unrecognized-format"


class AnalysisErrorKind(str, Enum):
    """Failure classes for a single analysis call."""

    CONFIGURATION = "configuration"
    RATE_LIMITED = "rate_limited"
    PAYMENT_REQUIRED = "payment_required"
    UPSTREAM_FAILURE = "upstream_failure"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"


_STATUS_CODES = {
    AnalysisErrorKind.RATE_LIMITED: 429,
    AnalysisErrorKind.PAYMENT_REQUIRED: 402,
}

_MESSAGES = {
    AnalysisErrorKind.CONFIGURATION: "The analysis service is not configured.",
    AnalysisErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again later.",
    AnalysisErrorKind.PAYMENT_REQUIRED: "Payment required. Please add credits to your workspace.",
    AnalysisErrorKind.UPSTREAM_FAILURE: "Failed to analyze image.",
    AnalysisErrorKind.EMPTY_RESPONSE: "No analysis result received. Please try again.",
    AnalysisErrorKind.MALFORMED_RESPONSE: "The analysis result could not be read. Please try again.",
}


class ParseError(ValueError):
    """Raised when no extraction strategy yields a valid record."""

    def __init__(self, reason: str = UNRECOGNIZED_FORMAT) -> None:
        super().__init__(f"Could not extract an analysis record: {reason}")
        self.reason = reason


class AnalysisError(Exception):
    """Raised by the analysis client for every failed call.

    Args:
        kind: Failure class used by callers to decide on retry or display.
        detail: Optional diagnostic text (e.g. the upstream response body).
    """

    def __init__(self, kind: AnalysisErrorKind, detail: Optional[str] = None) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)

    @property
    def status_code(self) -> int:
        """HTTP status used for this failure at the service boundary."""
        return _STATUS_CODES.get(self.kind, 500)

    @property
    def user_message(self) -> str:
        """Message safe to show to the end user."""
        return _MESSAGES[self.kind]

    @property
    def retryable(self) -> bool:
        """Whether a later, caller-initiated retry may succeed."""
        return self.kind in (
            AnalysisErrorKind.RATE_LIMITED,
            AnalysisErrorKind.EMPTY_RESPONSE,
            AnalysisErrorKind.MALFORMED_RESPONSE,
        )
