from __future__ import annotations

from typing import Iterator

from .models import Player


class PlayerRoster:
    """Players of one room, in join order (rotation follows this order)."""

    def __init__(self) -> None:
        self._players: list[Player] = []

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    def append(self, player: Player) -> None:
        self._players.append(player)

    def remove(self, session_id: str) -> tuple[Player, int] | None:
        """Remove a player; returns it with the position it held."""
        for idx, p in enumerate(self._players):
            if p.id == session_id:
                del self._players[idx]
                return p, idx
        return None

    def find(self, session_id: str) -> Player | None:
        for p in self._players:
            if p.id == session_id:
                return p
        return None

    def has_username(self, username: str) -> bool:
        return any(p.username == username for p in self._players)

    def public_view(self) -> list[dict]:
        return [p.public_view() for p in self._players]

    def reset_round_flags(self) -> None:
        for p in self._players:
            p.guessed_this_round = False

    def mark_drawer(self, session_id: str | None) -> None:
        for p in self._players:
            p.is_drawer = session_id is not None and p.id == session_id
