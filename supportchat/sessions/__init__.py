"""Sessions module - volatile per-visitor conversation state."""

from .store import Session, SessionStore, StoredMessage, SESSION_TTL, new_session_id, utc_now

__all__ = ['Session', 'SessionStore', 'StoredMessage', 'SESSION_TTL', 'new_session_id', 'utc_now']
