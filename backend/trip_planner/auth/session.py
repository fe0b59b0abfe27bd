"""Session provider used to gate the planner and history endpoints.

Sessions live on a provider instance (one per app) rather than in module
globals. Interested parties register with on_auth_state_change() and must call
unsubscribe() on the returned Subscription when they are done.
"""

import uuid
import secrets
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

AuthEvent = Literal["SIGNED_IN", "SIGNED_OUT"]
AuthListener = Callable[[AuthEvent, Optional["Session"]], None]

_USER_NAMESPACE = uuid.UUID("8d6f3c1e-2b7a-4c1d-9e57-3a0f6b2c9d41")


class Session(BaseModel):
    access_token: str
    user_id: str
    email: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Subscription:
    def __init__(self, provider: "SessionProvider", listener: AuthListener):
        self._provider = provider
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._provider._remove_listener(self._listener)
            self.active = False


class SessionProvider:
    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._listeners: List[AuthListener] = []
        self._lock = threading.Lock()

    def sign_in(self, email: str) -> Session:
        normalized = email.strip().lower()
        if "@" not in normalized:
            raise ValueError("A valid email address is required")
        session = Session(
            access_token=secrets.token_urlsafe(32),
            user_id=str(uuid.uuid5(_USER_NAMESPACE, normalized)),
            email=normalized,
        )
        with self._lock:
            self._sessions[session.access_token] = session
        self._emit("SIGNED_IN", session)
        return session

    def get_session(self, access_token: Optional[str]) -> Optional[Session]:
        if not access_token:
            return None
        with self._lock:
            return self._sessions.get(access_token)

    def sign_out(self, access_token: str) -> bool:
        with self._lock:
            session = self._sessions.pop(access_token, None)
        if session is None:
            return False
        self._emit("SIGNED_OUT", session)
        return True

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        with self._lock:
            self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove_listener(self, listener: AuthListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event: AuthEvent, session: Optional[Session]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, session)
            except Exception:
                logger.exception(f"Auth listener failed for {event}")
