from __future__ import annotations

from typing import Any, Protocol


# Client -> server
JOIN_ROOM = "joinRoom"
WORD_CHOSEN = "wordChosen"
DRAWING = "drawing"
CLEAR_CANVAS = "clearCanvas"
CHAT_MESSAGE = "chatMessage"
LEAVE_ROOM = "leaveRoom"

# Server -> client
UPDATE_PLAYERS = "updatePlayers"
PLAYER_JOINED = "playerJoined"
PLAYER_LEFT = "playerLeft"
ROUND_START = "roundStart"
TIMER_UPDATE = "timerUpdate"
ROUND_END = "roundEnd"
YOUR_TURN_TO_CHOOSE_WORD = "yourTurnToChooseWord"
CORRECT_GUESS = "correctGuess"
NEW_GUESS = "newGuess"
ERROR = "error"
# DRAWING, CLEAR_CANVAS and CHAT_MESSAGE are relayed under the same names.


class Broadcaster(Protocol):
    """Outbound side of the transport: room channels and single sessions."""

    def to_room(self, room_code: str, event: str, payload: Any = None, skip_sid: str | None = None) -> None:
        ...

    def to_session(self, session_id: str, event: str, payload: Any = None) -> None:
        ...

    def enter(self, session_id: str, room_code: str) -> None:
        ...

    def leave(self, session_id: str, room_code: str) -> None:
        ...


def system_message(text: str) -> dict:
    return {"username": None, "message": text, "type": "system"}


def chat_payload(username: str, text: str) -> dict:
    return {"username": username, "message": text, "type": "chat"}
