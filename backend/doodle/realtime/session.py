from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionContext:
    """What the server knows about one Socket.IO connection."""

    sid: str
    username: str = ""
    room_code: str = ""

    @property
    def in_room(self) -> bool:
        return bool(self.room_code)


class SessionStore:
    def __init__(self) -> None:
        self._sessions: dict[str, SessionContext] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, sid: str) -> SessionContext:
        ctx = self._sessions.get(sid)
        if ctx is None:
            ctx = SessionContext(sid=sid)
            self._sessions[sid] = ctx
        return ctx

    def drop(self, sid: str) -> SessionContext | None:
        return self._sessions.pop(sid, None)
