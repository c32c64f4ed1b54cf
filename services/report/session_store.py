"""Simple in-memory store for report sessions."""

from __future__ import annotations

from typing import Dict
from uuid import uuid4

from services.report.report_session import ReportSession


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown."""


class SessionStore:
    """Register report sessions so HTTP calls can reach the owning session."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ReportSession] = {}

    def add(self, session: ReportSession) -> str:
        """Register a session under a fresh id and return the id."""
        session_id = uuid4().hex
        session.session_id = session_id
        self._sessions[session_id] = session
        return session_id

    def get(self, session_id: str) -> ReportSession:
        """Return a session or raise SessionNotFoundError if missing."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def delete(self, session_id: str) -> None:
        """Discard a session or raise SessionNotFoundError if missing."""
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Session {session_id} not found")

    def __len__(self) -> int:
        return len(self._sessions)
