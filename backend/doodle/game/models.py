from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping


RoundPhase = Literal["idle", "choosing", "active", "ending"]


@dataclass
class Player:
    id: str
    username: str
    score: int = 0
    is_drawer: bool = False
    guessed_this_round: bool = False

    def public_view(self) -> dict:
        # Never expose guessed_this_round: it leaks who already got the word.
        return {
            "id": self.id,
            "username": self.username,
            "score": self.score,
            "isDrawer": self.is_drawer,
        }


@dataclass
class DrawingEvent:
    x: float
    y: float
    extra: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        payload = dict(self.extra)
        payload["x"] = self.x
        payload["y"] = self.y
        return payload


@dataclass(frozen=True)
class GameSettings:
    round_duration_sec: int = 90
    word_choices_count: int = 3
    choose_duration_sec: int = 15
    round_end_pause_sec: int = 3
    correct_guess_score: int = 100
    max_players_per_room: int = 10

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> GameSettings:
        defaults = cls()
        return cls(
            round_duration_sec=int(config.get("ROUND_DURATION_SEC", defaults.round_duration_sec)),
            word_choices_count=int(config.get("WORD_CHOICES_COUNT", defaults.word_choices_count)),
            choose_duration_sec=int(config.get("CHOOSE_DURATION_SEC", defaults.choose_duration_sec)),
            round_end_pause_sec=int(config.get("ROUND_END_PAUSE_SEC", defaults.round_end_pause_sec)),
            correct_guess_score=int(config.get("CORRECT_GUESS_SCORE", defaults.correct_guess_score)),
            max_players_per_room=int(config.get("MAX_PLAYERS_PER_ROOM", defaults.max_players_per_room)),
        )
