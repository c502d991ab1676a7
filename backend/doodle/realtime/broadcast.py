from __future__ import annotations

from typing import Any

from flask_socketio import SocketIO


class SocketIOBroadcaster:
    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self._socketio = socketio
        self._namespace = namespace

    def to_room(self, room_code: str, event: str, payload: Any = None, skip_sid: str | None = None) -> None:
        args = () if payload is None else (payload,)
        self._socketio.emit(event, *args, to=room_code, skip_sid=skip_sid, namespace=self._namespace)

    def to_session(self, session_id: str, event: str, payload: Any = None) -> None:
        args = () if payload is None else (payload,)
        self._socketio.emit(event, *args, to=session_id, namespace=self._namespace)

    def enter(self, session_id: str, room_code: str) -> None:
        self._socketio.server.enter_room(session_id, room_code, namespace=self._namespace)

    def leave(self, session_id: str, room_code: str) -> None:
        self._socketio.server.leave_room(session_id, room_code, namespace=self._namespace)
