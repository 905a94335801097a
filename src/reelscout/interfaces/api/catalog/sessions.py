"""Per-caller SearchSession store for the HTTP API.

The chat layer identifies its callers (chat id, user id) with an opaque
``session_id``; each id owns one SearchSession. The store is bounded and
evicts the least recently used session.
"""

from __future__ import annotations

from collections import OrderedDict

from reelscout.domain.entities.catalog import SearchSession

DEFAULT_MAX_SESSIONS = 1024


class SessionStore:
    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        self._max = max_sessions
        self._sessions: OrderedDict[str, SearchSession] = OrderedDict()

    def get(self, session_id: str) -> SearchSession:
        """Session for *session_id*, created on first use."""
        session = self._sessions.get(session_id)
        if session is None:
            session = SearchSession()
            self._sessions[session_id] = session
            while len(self._sessions) > self._max:
                self._sessions.popitem(last=False)
        else:
            self._sessions.move_to_end(session_id)
        return session

    def peek(self, session_id: str) -> SearchSession | None:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
