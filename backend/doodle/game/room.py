from __future__ import annotations

from dataclasses import dataclass, field

from .models import DrawingEvent, Player, RoundPhase
from .roster import PlayerRoster


@dataclass
class Room:
    code: str
    players: PlayerRoster = field(default_factory=PlayerRoster)
    drawer_index: int = -1
    word: str = ""
    hint: str = ""
    word_choices: list[str] = field(default_factory=list)
    round: int = 0
    phase: RoundPhase = "idle"
    game_started: bool = False
    draw_history: list[DrawingEvent] = field(default_factory=list)

    @property
    def round_active(self) -> bool:
        return self.phase in ("choosing", "active")

    @property
    def drawer(self) -> Player | None:
        if not self.round_active:
            return None
        if 0 <= self.drawer_index < len(self.players):
            return self.players[self.drawer_index]
        return None

    def is_drawer(self, session_id: str) -> bool:
        drawer = self.drawer
        return drawer is not None and drawer.id == session_id
