from __future__ import annotations

import logging
from threading import RLock
from typing import Sequence

from ..realtime.events import Broadcaster
from .controller import RoundController
from .errors import DuplicateUsername, RoomFull, ValidationError
from .models import GameSettings, Player
from .room import Room
from .scheduler import TaskScheduler


logger = logging.getLogger(__name__)


class RoomRegistry:
    """Process-wide directory of rooms.

    The only place rooms are created or destroyed. Callers hold `lock`
    for the whole of a request so room mutations never interleave.
    """

    def __init__(
        self,
        broadcaster: Broadcaster,
        tasks: TaskScheduler,
        settings: GameSettings | None = None,
        words: Sequence[str] | None = None,
        lock: RLock | None = None,
    ) -> None:
        self.broadcaster = broadcaster
        self.tasks = tasks
        self.settings = settings or GameSettings()
        self.lock = lock or RLock()
        self._words = words
        self._rooms: dict[str, RoundController] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def get(self, room_code: str) -> RoundController | None:
        with self.lock:
            return self._rooms.get(room_code)

    def _create(self, room_code: str) -> RoundController:
        controller = RoundController(
            Room(code=room_code),
            self.broadcaster,
            self.tasks,
            self.settings,
            words=self._words,
        )
        self._rooms[room_code] = controller
        logger.info("[room-create] room=%s", room_code)
        return controller

    def _destroy(self, room_code: str) -> None:
        controller = self._rooms.pop(room_code, None)
        if controller is None:
            return
        controller.stop()
        logger.info("[room-destroy] room=%s", room_code)

    def join(self, session_id: str, username: str, room_code: str) -> RoundController:
        username = (username or "").strip()
        room_code = (room_code or "").strip()
        if not username or not room_code:
            raise ValidationError()

        with self.lock:
            controller = self._rooms.get(room_code)
            if controller is not None:
                players = controller.room.players
                if players.has_username(username):
                    raise DuplicateUsername()
                if len(players) >= self.settings.max_players_per_room:
                    raise RoomFull()
            else:
                controller = self._create(room_code)

            self.broadcaster.enter(session_id, room_code)
            controller.add_player(Player(id=session_id, username=username))
            logger.info("[room-join] room=%s player=%s count=%d", room_code, username, len(controller.room.players))
            return controller

    def leave(self, session_id: str, room_code: str) -> Player | None:
        with self.lock:
            controller = self._rooms.get(room_code)
            if controller is None:
                return None

            player = controller.remove_player(session_id)
            self.broadcaster.leave(session_id, room_code)
            if player is not None:
                logger.info("[room-leave] room=%s player=%s count=%d", room_code, player.username, len(controller.room.players))
            if not controller.room.players:
                self._destroy(room_code)
            return player

    def disconnect(self, session_id: str) -> Player | None:
        """Leave whichever room holds this session (one at most)."""
        with self.lock:
            for code, controller in list(self._rooms.items()):
                if controller.room.players.find(session_id) is not None:
                    return self.leave(session_id, code)
            return None

    def close(self) -> None:
        with self.lock:
            for code in list(self._rooms):
                self._destroy(code)
