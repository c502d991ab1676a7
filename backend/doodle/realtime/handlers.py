from __future__ import annotations

import logging
from typing import Any, Callable

from flask import request
from flask_socketio import SocketIO

from ..game.controller import RoundController
from ..game.errors import GameError, ValidationError
from ..game.registry import RoomRegistry
from . import events
from .session import SessionContext, SessionStore


logger = logging.getLogger(__name__)

Handler = Callable[[RoomRegistry, SessionContext, Any], None]


def _room_code(payload: Any) -> str:
    # Older clients send the bare room code for leave/clear.
    if isinstance(payload, str):
        return payload.strip()
    if isinstance(payload, dict):
        return str(payload.get("roomCode") or payload.get("roomId") or "").strip()
    return ""


def _controller_for(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> RoundController | None:
    """The room this event targets, or None when it is stale or foreign."""
    code = _room_code(payload) or ctx.room_code
    if not code or code != ctx.room_code:
        return None
    return registry.get(code)


def on_join_room(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> None:
    data = payload if isinstance(payload, dict) else {}
    username = str(data.get("username") or "").strip()
    room_code = _room_code(data)

    if ctx.in_room:
        raise ValidationError(f"You are already in room {ctx.room_code}. Leave it first.")

    registry.join(ctx.sid, username, room_code)
    ctx.username = username
    ctx.room_code = room_code


def on_word_chosen(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> None:
    controller = _controller_for(registry, ctx, payload)
    if controller is None:
        return
    word = str(payload.get("word") or "") if isinstance(payload, dict) else ""
    controller.choose_word(ctx.sid, word)


def on_drawing(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> None:
    controller = _controller_for(registry, ctx, payload)
    if controller is None:
        return
    controller.draw(ctx.sid, payload)


def on_clear_canvas(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> None:
    controller = _controller_for(registry, ctx, payload)
    if controller is None:
        return
    controller.clear_canvas(ctx.sid)


def on_chat_message(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> None:
    controller = _controller_for(registry, ctx, payload)
    if controller is None or not isinstance(payload, dict):
        return
    controller.chat(ctx.sid, str(payload.get("message") or ""))


def on_leave_room(registry: RoomRegistry, ctx: SessionContext, payload: Any) -> None:
    code = _room_code(payload) or ctx.room_code
    if not code or code != ctx.room_code:
        return
    registry.leave(ctx.sid, code)
    ctx.room_code = ""
    ctx.username = ""


DISPATCH: dict[str, Handler] = {
    events.JOIN_ROOM: on_join_room,
    events.WORD_CHOSEN: on_word_chosen,
    events.DRAWING: on_drawing,
    events.CLEAR_CANVAS: on_clear_canvas,
    events.CHAT_MESSAGE: on_chat_message,
    events.LEAVE_ROOM: on_leave_room,
}


def dispatch(registry: RoomRegistry, ctx: SessionContext, event: str, payload: Any = None) -> None:
    handler = DISPATCH.get(event)
    if handler is None:
        return

    with registry.lock:
        try:
            handler(registry, ctx, payload)
        except GameError as exc:
            logger.debug("[rejected] event=%s sid=%s reason=%s", event, ctx.sid, exc.message)
            registry.broadcaster.to_session(ctx.sid, events.ERROR, {"message": exc.message})


def handle_disconnect(registry: RoomRegistry, sessions: SessionStore, sid: str) -> None:
    ctx = sessions.drop(sid)
    with registry.lock:
        if ctx is not None and ctx.in_room:
            registry.leave(sid, ctx.room_code)
        else:
            registry.disconnect(sid)


def register_socketio_handlers(socketio: SocketIO, registry: RoomRegistry, sessions: SessionStore) -> None:
    def _bind(event: str) -> None:
        def _handler(data=None):
            dispatch(registry, sessions.get(request.sid), event, data)

        socketio.on_event(event, _handler)

    for event in DISPATCH:
        _bind(event)

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.debug("[connect] sid=%s", request.sid)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        logger.debug("[disconnect] sid=%s", request.sid)
        handle_disconnect(registry, sessions, request.sid)
