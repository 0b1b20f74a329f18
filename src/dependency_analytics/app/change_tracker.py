from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

AnalyzeCallback = Callable[[str, str, int], Awaitable[Any]]


@dataclass
class DocumentSession:
    uri: str
    text: str = ""
    pending: Optional[asyncio.TimerHandle] = field(default=None, repr=False)
    cycle_id: int = 0

    def cancel_pending(self) -> None:
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None


class ChangeTracker:
    """Turns document events into analysis cycles.

    Edits are debounced per document: a burst of changes to one URI yields a
    single analysis once the document has been quiet for ``quiescence_seconds``.
    Opening or saving a document analyzes it immediately. Each trigger bumps the
    document's cycle id, so results of an older cycle can be recognised as stale
    via ``is_current``.
    """

    def __init__(self, analyze: AnalyzeCallback, quiescence_seconds: float = 0.5) -> None:
        self._analyze = analyze
        self._quiescence = quiescence_seconds
        self._sessions: dict[str, DocumentSession] = {}
        # Last cycle id issued per URI; survives did_close so reopened documents never reuse an id.
        self._last_cycle: dict[str, int] = {}
        self._tasks: set[asyncio.Task] = set()

    def session(self, uri: str) -> Optional[DocumentSession]:
        return self._sessions.get(uri)

    def did_open(self, uri: str, text: str) -> None:
        session = self._sessions.setdefault(uri, DocumentSession(uri))
        session.text = text
        self._trigger(session)

    def did_change(self, uri: str, text: str) -> None:
        session = self._sessions.setdefault(uri, DocumentSession(uri))
        session.text = text
        session.cancel_pending()
        loop = asyncio.get_running_loop()
        session.pending = loop.call_later(self._quiescence, self._on_quiet, uri)

    def did_save(self, uri: str, text: Optional[str] = None) -> None:
        session = self._sessions.get(uri)
        if session is None:
            if text is None:
                logger.debug(f"Ignoring save of {uri}: no text known")
                return
            session = self._sessions[uri] = DocumentSession(uri)
        if text is not None:
            session.text = text
        self._trigger(session)

    def did_close(self, uri: str) -> None:
        session = self._sessions.pop(uri, None)
        if session is not None:
            session.cancel_pending()

    def is_current(self, uri: str, cycle_id: int) -> bool:
        session = self._sessions.get(uri)
        return session is not None and session.cycle_id == cycle_id

    async def drain(self) -> None:
        """Wait until no analysis is running. Pending timers are not awaited."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_quiet(self, uri: str) -> None:
        session = self._sessions.get(uri)
        if session is None:
            return
        session.pending = None
        self._trigger(session)

    def _trigger(self, session: DocumentSession) -> None:
        session.cancel_pending()
        session.cycle_id = self._last_cycle.get(session.uri, 0) + 1
        self._last_cycle[session.uri] = session.cycle_id
        logger.debug(f"Starting cycle {session.cycle_id} for {session.uri}")
        task = asyncio.ensure_future(self._analyze(session.uri, session.text, session.cycle_id))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Analysis task failed", exc_info=exc)
