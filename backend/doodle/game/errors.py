from __future__ import annotations


class GameError(Exception):
    """Rejection of a player request; reported to that player only."""

    message = "Request rejected."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(GameError):
    message = "Username and Room ID are required."


class DuplicateUsername(GameError):
    message = "Username already taken in this room. Please choose another."


class RoomFull(GameError):
    message = "This room is full. Please try another room."


class NotAuthorized(GameError):
    message = "Not authorized."
