from __future__ import annotations

from enum import Enum

from .room import Room


class Verdict(str, Enum):
    CHAT = "chat"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    # Sender already guessed this round; delivered as ordinary chat.
    REPEAT = "repeat"


def is_match(message: str, word: str) -> bool:
    if not word:
        return False
    return message.strip().lower() == word.strip().lower()


def evaluate_guess(room: Room, session_id: str, message: str) -> Verdict:
    """Classify a chat message against the room's secret word.

    Pure: neither the room nor the sender is modified.
    """
    if room.phase != "active" or not room.word:
        return Verdict.CHAT
    if room.is_drawer(session_id):
        return Verdict.CHAT

    sender = room.players.find(session_id)
    if sender is None:
        return Verdict.CHAT

    if not is_match(message, room.word):
        return Verdict.INCORRECT
    if sender.guessed_this_round:
        return Verdict.REPEAT
    return Verdict.CORRECT
