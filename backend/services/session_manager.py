"""
Session Manager - One diff engine per open document
"""

from __future__ import annotations

import asyncio
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field

from models.diff import DiffResult

from .diff_engine import DEFAULT_WARN_TABLE_CELLS, DiffEngine
from .logging_config import get_logger

logger = get_logger("sessions")


class SessionNotFoundError(KeyError):
    """Raised for an unknown or already closed session id"""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


@dataclass
class EditingSession:
    """State for one open document"""

    session_id: str
    engine: DiffEngine
    current: str | None = None
    last_diff: DiffResult = field(default_factory=DiffResult.empty)
    subscribers: list[asyncio.Queue] = field(default_factory=list)


class SessionManager:
    """Own the editing sessions and drive their baseline lifecycle"""

    def __init__(
        self,
        max_sessions: int = 32,
        warn_table_cells: int = DEFAULT_WARN_TABLE_CELLS,
    ):
        self.max_sessions = max(1, max_sessions)
        self.warn_table_cells = warn_table_cells
        self._sessions: OrderedDict[str, EditingSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> EditingSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._sessions.move_to_end(session_id)
        return session

    # ========== Lifecycle ==========

    def create_session(self, content: str | None = None) -> EditingSession:
        """Open a session; content, when given, is loaded as the baseline"""
        while len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            logger.info(f"Session limit {self.max_sessions} reached, evicting {oldest}")
            self.close_session(oldest)

        session = EditingSession(
            session_id=str(uuid.uuid4()),
            engine=DiffEngine(warn_table_cells=self.warn_table_cells),
        )
        self._sessions[session.session_id] = session
        if content is not None:
            self.load(session.session_id, content)
        logger.info(f"Opened session {session.session_id}")
        return session

    def load(self, session_id: str, content: str) -> EditingSession:
        """A file was loaded: it becomes both the baseline and the current content"""
        session = self.get(session_id)
        session.engine.set_baseline(content)
        session.current = content
        session.last_diff = DiffResult.empty()
        self._publish(session, session.last_diff)
        return session

    def update(self, session_id: str, content: str) -> DiffResult:
        """The file changed on disk: diff it against the baseline"""
        session = self.get(session_id)
        session.current = content
        session.last_diff = session.engine.compute_diff(content)
        self._publish(session, session.last_diff)
        return session.last_diff

    def reset_baseline(self, session_id: str) -> EditingSession:
        """Accept the current content as the new baseline"""
        session = self.get(session_id)
        if session.current is not None:
            session.engine.set_baseline(session.current)
        session.last_diff = DiffResult.empty()
        self._publish(session, session.last_diff)
        return session

    def clear(self, session_id: str) -> EditingSession:
        """The file was closed or deleted"""
        session = self.get(session_id)
        session.engine.clear_baseline()
        session.current = None
        session.last_diff = DiffResult.empty()
        self._publish(session, session.last_diff)
        return session

    def close_session(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        for queue in session.subscribers:
            queue.put_nowait(None)
        session.subscribers.clear()
        logger.info(f"Closed session {session_id}")

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close_session(session_id)

    # ========== Change events ==========

    def subscribe(self, session_id: str) -> asyncio.Queue:
        """Register a listener; it receives every published diff, then None on close"""
        session = self.get(session_id)
        queue: asyncio.Queue = asyncio.Queue()
        session.subscribers.append(queue)
        logger.debug(f"Subscriber added to {session_id} ({len(session.subscribers)} total)")
        return queue

    def unsubscribe(self, session_id: str, queue: asyncio.Queue) -> None:
        session = self._sessions.get(session_id)
        if session is not None and queue in session.subscribers:
            session.subscribers.remove(queue)

    def _publish(self, session: EditingSession, diff: DiffResult) -> None:
        for queue in session.subscribers:
            queue.put_nowait(diff)
