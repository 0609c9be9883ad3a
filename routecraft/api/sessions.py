"""In-memory registry of open draft sessions."""

from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass, field

from routecraft.persistence.auth_context import AuthContext
from routecraft.services.draft import RouteDraftController


@dataclass
class DraftSession:
    """One editing session: a controller plus the auth it calls the backend with.

    A session belongs to the token that opened it; its ``AuthContext``
    only ever holds that token.
    """

    session_id: str
    controller: RouteDraftController
    auth: AuthContext
    owner_token: str = field(repr=False)

    def owned_by(self, token: str) -> bool:
        return secrets.compare_digest(self.owner_token, token)


class DraftSessionStore:
    def __init__(self):
        self._sessions: dict[str, DraftSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, controller: RouteDraftController, auth: AuthContext) -> DraftSession:
        token = auth.get()
        if token is None:
            raise ValueError("A draft session needs an authenticated AuthContext")
        session = DraftSession(uuid.uuid4().hex, controller, auth, token)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> DraftSession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> DraftSession | None:
        """Forget a session and discard its draft."""
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.controller.discard()
        return session
