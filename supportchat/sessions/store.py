"""
Session Store - Volatile, in-memory conversation sessions keyed by cookie id.

Sessions expire after a fixed idle period. Expiry is applied lazily on lookup
and can also be applied in bulk through ``sweep_expired`` (called periodically
by the application lifespan task).
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(minutes=30)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_session_id() -> str:
    return uuid.uuid4().hex


@dataclass
class StoredMessage:
    """One conversation turn as replayed to the LLM."""
    role: str  # "user", "assistant", "system"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class Session:
    """Server-side record of one visitor's conversation."""
    id: str
    created_at: datetime
    last_used_at: datetime
    kb_sent: bool = False
    messages: List[StoredMessage] = field(default_factory=list)


class SessionStore:
    """
    Registry of conversation sessions.

    All operations are synchronous in-memory mutations, so under a single
    event loop each call is atomic relative to other requests.
    """

    def __init__(
        self,
        ttl: timedelta = SESSION_TTL,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_session_id,
    ):
        """
        Args:
            ttl: Idle lifetime of a session
            clock: Returns the current time (injectable for tests)
            id_factory: Generates fresh session ids
        """
        self.ttl = ttl
        self._clock = clock
        self._id_factory = id_factory
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def _is_expired(self, session: Session, now: datetime) -> bool:
        return now - session.last_used_at > self.ttl

    def new_session_id(self) -> str:
        """Generate an id that is not currently in use."""
        session_id = self._id_factory()
        while session_id in self._sessions:
            session_id = self._id_factory()
        return session_id

    def get(self, session_id: str) -> Optional[Session]:
        """
        Look up a live session, refreshing its last-used time.

        Returns None if the session never existed or has been idle for longer
        than the TTL; an expired session is deleted as a side effect.
        """
        session = self._sessions.get(session_id)
        if session is None:
            return None

        now = self._clock()
        if self._is_expired(session, now):
            del self._sessions[session_id]
            logger.info(f"Session expired: {session_id}")
            return None

        session.last_used_at = now
        return session

    def create_or_touch(self, session_id: str) -> Session:
        """Return the live session for ``session_id``, creating an empty one if absent."""
        session = self.get(session_id)
        if session is not None:
            return session

        now = self._clock()
        session = Session(id=session_id, created_at=now, last_used_at=now)
        self._sessions[session_id] = session
        logger.debug(f"Session created: {session_id}")
        return session

    def has_sent_kb(self, session_id: str) -> bool:
        session = self.get(session_id)
        return session.kb_sent if session else False

    def mark_kb_sent(self, session_id: str) -> None:
        self.create_or_touch(session_id).kb_sent = True

    def add_message(self, session_id: str, role: str, content: str) -> None:
        session = self.create_or_touch(session_id)
        session.messages.append(StoredMessage(role=role, content=content))
        logger.debug(
            f"Added {role} message to session {session_id} "
            f"({len(session.messages)} messages)"
        )

    def get_messages(self, session_id: str) -> List[StoredMessage]:
        """Ordered copy of the session history (empty if absent or expired)."""
        session = self.get(session_id)
        if session is None:
            return []
        return list(session.messages)

    def clear(self, session_id: Optional[str]) -> str:
        """
        Drop ``session_id`` (if present) and provision a fresh empty session.

        Returns:
            The new session id, which never equals ``session_id``
        """
        if session_id and self._sessions.pop(session_id, None) is not None:
            logger.info(f"Cleared session {session_id}")

        new_id = self.new_session_id()
        while new_id == session_id:
            new_id = self.new_session_id()
        self.create_or_touch(new_id)
        return new_id

    def sweep_expired(self) -> int:
        """Delete every expired session. Returns the number removed."""
        now = self._clock()
        expired = [
            sid for sid, session in self._sessions.items()
            if self._is_expired(session, now)
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(
                f"Swept {len(expired)} expired sessions",
                extra={"extra_fields": {"expired": len(expired), "remaining": len(self._sessions)}}
            )
        return len(expired)
