from __future__ import annotations

import logging
from typing import Any

from ..realtime import events
from ..realtime.events import Broadcaster
from .errors import NotAuthorized
from .models import DrawingEvent
from .room import Room


logger = logging.getLogger(__name__)

# Protocol fields that are routing, not stroke data.
_ENVELOPE_KEYS = {"roomCode", "roomId", "x", "y"}


def parse_sample(payload: dict) -> DrawingEvent | None:
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    extra = {k: v for k, v in payload.items() if k not in _ENVELOPE_KEYS}
    return DrawingEvent(x=x, y=y, extra=extra)


class DrawingRelay:
    """Stroke relay for one room; only the current drawer may draw or clear."""

    def __init__(self, room: Room, broadcaster: Broadcaster) -> None:
        self.room = room
        self._broadcaster = broadcaster

    def draw(self, session_id: str, payload: Any) -> bool:
        # Stale or misbehaving clients are dropped without an error.
        if not self.room.is_drawer(session_id) or not isinstance(payload, dict):
            return False

        sample = parse_sample(payload)
        if sample is None:
            return False

        self.room.draw_history.append(sample)
        self._broadcaster.to_room(self.room.code, events.DRAWING, sample.to_payload(), skip_sid=session_id)
        return True

    def clear(self, session_id: str) -> None:
        if not self.room.is_drawer(session_id):
            raise NotAuthorized("Only the drawer can clear the canvas.")
        self.room.draw_history = []
        self._broadcaster.to_room(self.room.code, events.CLEAR_CANVAS)

    def replay_to(self, session_id: str) -> int:
        for sample in self.room.draw_history:
            self._broadcaster.to_session(session_id, events.DRAWING, sample.to_payload())
        logger.debug("[replay] room=%s sid=%s samples=%d", self.room.code, session_id, len(self.room.draw_history))
        return len(self.room.draw_history)

    def reset(self) -> None:
        self.room.draw_history = []
