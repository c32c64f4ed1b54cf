"""Holder for the report currently shown to the user.

A session owns one `(record, language, image)` snapshot. The snapshot is
replaced wholesale after a successful analysis and left untouched after a
failed one, so the last good report stays available for display and export.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from models.analysis_record import AnalysisRecord, SourceImage
from models.languages import get_language

LOGGER = logging.getLogger(__name__)


class SessionBusyError(RuntimeError):
    """Raised when a re-analysis is requested while another is outstanding."""


class Analyzer(Protocol):
    async def analyze(self, image: SourceImage, language: str) -> AnalysisRecord: ...


@dataclass(frozen=True)
class ReportState:
    """Immutable snapshot of the displayed report."""

    record: AnalysisRecord
    language: str
    image: SourceImage


class ReportSession:
    """Single-writer owner of one analysis workflow's report state."""

    def __init__(self, analyzer: Analyzer, state: ReportState, session_id: Optional[str] = None) -> None:
        self.analyzer = analyzer
        self.session_id = session_id
        self._state = state
        self._lock = asyncio.Lock()

    @classmethod
    async def start(cls, analyzer: Analyzer, image: SourceImage, language: str) -> "ReportSession":
        """Run the first analysis and return a session holding its result.

        Raises:
            AnalysisError: If the initial analysis fails; no session is created.
        """
        code = get_language(language).code
        record = await analyzer.analyze(image, code)
        return cls(analyzer, ReportState(record=record, language=code, image=image))

    @property
    def state(self) -> ReportState:
        return self._state

    @property
    def record(self) -> AnalysisRecord:
        return self._state.record

    @property
    def language(self) -> str:
        return self._state.language

    @property
    def image(self) -> SourceImage:
        return self._state.image

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def reanalyze(self, new_language: str) -> AnalysisRecord:
        """Re-run the analysis of the held image in `new_language`.

        Returns the current record without any model call when the language is
        unchanged. On success the held record and language are replaced
        together; on failure the session is unchanged and the error propagates.

        Raises:
            UnknownLanguageError: If `new_language` is not in the catalog.
            SessionBusyError: If another re-analysis is still outstanding.
            AnalysisError: If the analysis call fails.
        """
        code = get_language(new_language).code
        current = self._state
        if code == current.language:
            return current.record

        if self._lock.locked():
            raise SessionBusyError("A re-analysis is already in progress for this report.")

        async with self._lock:
            record = await self.analyzer.analyze(current.image, code)
            self._state = ReportState(record=record, language=code, image=current.image)

        LOGGER.info("Report %s switched from %s to %s", self.session_id, current.language, code)
        return record
