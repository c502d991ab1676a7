from __future__ import annotations

import logging
from typing import Any, Sequence

from ..realtime import events
from ..realtime.events import Broadcaster, chat_payload, system_message
from .errors import NotAuthorized
from .guesses import Verdict, evaluate_guess
from .models import GameSettings, Player
from .relay import DrawingRelay
from .room import Room
from .scheduler import TaskScheduler, TurnScheduler, drawer_index_after_removal, next_drawer_index
from .words import DEFAULT_WORDS, PLACEHOLDER_HINT, mask_word, pick_words


logger = logging.getLogger(__name__)


class RoundController:
    """Round state machine for a single room.

    idle -> choosing -> active -> ending -> choosing ...

    Every transition that leaves choosing or active cancels the room's
    timers before anything else, so a stale timer cannot fire into the
    next round.
    """

    def __init__(
        self,
        room: Room,
        broadcaster: Broadcaster,
        tasks: TaskScheduler,
        settings: GameSettings,
        words: Sequence[str] | None = None,
    ) -> None:
        self.room = room
        self.settings = settings
        self.turns = TurnScheduler(room.code, tasks, settings)
        self.relay = DrawingRelay(room, broadcaster)
        self._broadcaster = broadcaster
        self._words = list(words or DEFAULT_WORDS)

    # -- notifications -------------------------------------------------

    def _emit(self, event: str, payload: Any = None) -> None:
        self._broadcaster.to_room(self.room.code, event, payload)

    def _announce(self, text: str) -> None:
        self._emit(events.CHAT_MESSAGE, system_message(text))

    def broadcast_players(self) -> None:
        self._emit(events.UPDATE_PLAYERS, self.room.players.public_view())

    # -- membership ----------------------------------------------------

    def add_player(self, player: Player) -> None:
        room = self.room
        room.players.append(player)
        self._emit(events.PLAYER_JOINED, player.username)
        self.broadcast_players()

        if not room.game_started:
            room.game_started = True
            if len(room.players) == 1:
                self._announce(f"Waiting for more players to join room {room.code}...")
            self.start_new_round()
        elif room.round_active:
            self.sync_late_joiner(player.id)

    def sync_late_joiner(self, session_id: str) -> None:
        room = self.room
        drawer = room.drawer
        timer = self.turns.remaining if room.phase == "active" else self.settings.round_duration_sec
        self._broadcaster.to_session(
            session_id,
            events.ROUND_START,
            {
                "drawerId": drawer.id if drawer else None,
                "wordHint": room.hint or PLACEHOLDER_HINT,
                "timer": timer,
            },
        )
        self.relay.replay_to(session_id)

    def remove_player(self, session_id: str) -> Player | None:
        """Remove a player and apply the departure rules.

        Returns the removed player; the caller destroys the room when it is
        left empty.
        """
        room = self.room
        was_drawer = room.is_drawer(session_id)
        removed = room.players.remove(session_id)
        if removed is None:
            return None
        player, position = removed
        room.drawer_index = drawer_index_after_removal(room.drawer_index, position, len(room.players))

        self._broadcaster.to_room(room.code, events.PLAYER_LEFT, player.username, skip_sid=session_id)
        self.broadcast_players()

        if not room.players:
            self.stop()
        elif len(room.players) == 1 and room.game_started:
            self._announce("Not enough players to continue. Waiting for more.")
            self.end_round("Not enough players.")
            self.stop()
        elif was_drawer:
            self._announce(f"{player.username} (the drawer) left!")
            self.end_round("The drawer left the game.")
        return player

    # -- round lifecycle -----------------------------------------------

    def start_new_round(self) -> bool:
        room = self.room
        self.turns.cancel_all()
        if not room.players or not room.game_started:
            room.phase = "idle"
            return False

        room.round += 1
        room.word = ""
        room.hint = ""
        room.phase = "choosing"
        room.players.reset_round_flags()
        self.relay.reset()

        room.drawer_index = next_drawer_index(room.drawer_index, len(room.players))
        drawer = room.players[room.drawer_index]
        room.players.mark_drawer(drawer.id)
        logger.info("[round-start] room=%s round=%d drawer=%s", room.code, room.round, drawer.username)

        self.broadcast_players()
        self._announce(f"New round! {drawer.username} is drawing.")
        self._emit(events.CLEAR_CANVAS)

        room.word_choices = pick_words(self._words, self.settings.word_choices_count)
        self._broadcaster.to_session(drawer.id, events.YOUR_TURN_TO_CHOOSE_WORD, list(room.word_choices))
        self._emit(
            events.ROUND_START,
            {"drawerId": drawer.id, "wordHint": PLACEHOLDER_HINT, "timer": self.settings.round_duration_sec},
        )

        self.turns.arm_word_choice(self._on_choose_timeout)
        return True

    def choose_word(self, session_id: str, word: str) -> None:
        room = self.room
        if not room.is_drawer(session_id):
            raise NotAuthorized("Not authorized to choose a word.")
        if room.phase != "choosing" or room.word:
            raise NotAuthorized("You already chose a word or it's not your turn to choose.")

        w = (word or "").strip()
        # Only an offered candidate is accepted, never free text.
        if not w or (room.word_choices and w not in room.word_choices):
            raise NotAuthorized("Please pick one of the offered words.")

        self.turns.cancel_word_choice()
        room.word = w
        room.hint = mask_word(w)
        room.word_choices = []
        room.phase = "active"
        logger.info("[word-chosen] room=%s round=%d", room.code, room.round)

        self._emit(
            events.ROUND_START,
            {"drawerId": session_id, "wordHint": room.hint, "timer": self.settings.round_duration_sec},
        )
        self._announce("The word has been chosen! Start guessing!")
        self._emit(events.TIMER_UPDATE, self.settings.round_duration_sec)
        self.turns.start_countdown(self._on_tick, self._on_time_up)

    def end_round(self, message: str = "") -> None:
        room = self.room
        self.turns.cancel_all()
        logger.info("[round-end] room=%s round=%d reason=%r", room.code, room.round, message)

        room.phase = "ending"
        room.word = ""
        room.hint = ""
        room.word_choices = []
        self.relay.reset()
        room.players.reset_round_flags()
        room.players.mark_drawer(None)

        self._emit(events.ROUND_END, {"message": message})
        self._emit(events.CLEAR_CANVAS)
        self.broadcast_players()

        self.turns.schedule_next_round(self.start_new_round)

    def stop(self) -> None:
        """Force the room idle; nothing restarts until a new player joins."""
        room = self.room
        self.turns.cancel_all()
        room.phase = "idle"
        room.game_started = False
        room.word = ""
        room.hint = ""
        room.word_choices = []
        room.players.mark_drawer(None)
        self.relay.reset()

    # -- timers --------------------------------------------------------

    def _on_choose_timeout(self) -> None:
        room = self.room
        if room.phase != "choosing" or room.word:
            return
        drawer = room.drawer
        name = drawer.username if drawer else "The drawer"
        self._announce(f"{name} failed to choose a word.")
        self.end_round("Drawer failed to choose a word.")

    def _on_tick(self, seconds: int) -> None:
        self._emit(events.TIMER_UPDATE, seconds)

    def _on_time_up(self) -> None:
        self.end_round("Time is up! No one guessed the word.")

    # -- in-round requests ---------------------------------------------

    def chat(self, session_id: str, message: str) -> Verdict | None:
        room = self.room
        text = str(message or "")
        if not text.strip():
            return None
        sender = room.players.find(session_id)
        if sender is None:
            return None

        verdict = evaluate_guess(room, session_id, text)
        if verdict is Verdict.CORRECT:
            self._score_correct_guess(sender)
        elif verdict is Verdict.INCORRECT:
            self._emit(events.NEW_GUESS, {"username": sender.username, "guess": text})
        else:
            self._emit(events.CHAT_MESSAGE, chat_payload(sender.username, text))
        return verdict

    def _score_correct_guess(self, player: Player) -> None:
        room = self.room
        word = room.word
        player.score += self.settings.correct_guess_score
        player.guessed_this_round = True
        logger.info("[correct-guess] room=%s round=%d player=%s", room.code, room.round, player.username)

        self._emit(events.CORRECT_GUESS, {"username": player.username, "word": word, "score": player.score})
        self._announce(f"{player.username} guessed correctly! The word was: {word}.")
        self.broadcast_players()
        # Ends synchronously: later guesses see an inactive round.
        self.end_round(f"{player.username} guessed the word!")

    def draw(self, session_id: str, payload: Any) -> bool:
        return self.relay.draw(session_id, payload)

    def clear_canvas(self, session_id: str) -> None:
        self.relay.clear(session_id)
