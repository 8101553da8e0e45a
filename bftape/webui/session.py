from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from bftape.inspector import DEFAULT_MAX_SIZE, InspectorSession

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    session_id: str
    session: InspectorSession
    total_steps: int = 0
    total_steps_capped: bool = False


class SessionStore:
    """Thread-safe registry for InspectorSession instances."""

    def __init__(self) -> None:
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = threading.RLock()

    def create_session(
        self,
        *,
        code: str,
        input_template: List[int],
        max_size: int = DEFAULT_MAX_SIZE,
        tape_window: int = 10,
        max_steps: Optional[int] = None,
        history_limit: int = 200,
        total_steps: int = 0,
        total_steps_capped: bool = False,
    ) -> SessionRecord:
        session = InspectorSession(
            code=code,
            input_template=input_template,
            max_size=max_size,
            tape_window=tape_window,
            max_steps=max_steps,
            history_limit=history_limit,
        )
        session_id = uuid.uuid4().hex
        record = SessionRecord(
            session_id=session_id,
            session=session,
            total_steps=total_steps,
            total_steps_capped=total_steps_capped,
        )
        with self._lock:
            self._sessions[session_id] = record
        logger.info("created session %s (%d instructions)", session_id, len(session.program_text))
        return record

    def get(self, session_id: str) -> SessionRecord:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError as exc:
                raise KeyError(f"Unknown session id: {session_id}") from exc

    def reset(self, session_id: str) -> SessionRecord:
        record = self.get(session_id)
        record.session.restart()
        return record

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("removed session %s", session_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


__all__ = ["SessionRecord", "SessionStore"]
