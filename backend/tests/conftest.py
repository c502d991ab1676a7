import heapq
from collections import defaultdict

import pytest

from doodle.game.models import GameSettings
from doodle.game.registry import RoomRegistry
from doodle.game.scheduler import ScheduledTask
from doodle.server import create_app


class ManualScheduler:
    """Deterministic TaskScheduler driven by advance()."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = 0

    def call_later(self, delay, callback, name=""):
        task = ScheduledTask(name)
        self._seq += 1
        heapq.heappush(self._queue, (self.now + delay, self._seq, task, callback))
        return task

    @property
    def pending(self):
        return [entry[2] for entry in self._queue if entry[2].pending]

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, task, callback = heapq.heappop(self._queue)
            self.now = when
            if task.cancelled:
                continue
            task.fired = True
            callback()
        self.now = target


class RecordingBroadcaster:
    """Keeps room membership and what each session would have received."""

    def __init__(self):
        self.members = defaultdict(set)
        self.inbox = defaultdict(list)
        self.room_log = []

    def to_room(self, room_code, event, payload=None, skip_sid=None):
        self.room_log.append((room_code, event, payload))
        for sid in sorted(self.members[room_code]):
            if sid != skip_sid:
                self.inbox[sid].append((event, payload))

    def to_session(self, session_id, event, payload=None):
        self.inbox[session_id].append((event, payload))

    def enter(self, session_id, room_code):
        self.members[room_code].add(session_id)

    def leave(self, session_id, room_code):
        self.members[room_code].discard(session_id)

    def received(self, sid, event=None):
        return [p for e, p in self.inbox[sid] if event is None or e == event]

    def names(self, sid):
        return [e for e, _ in self.inbox[sid]]

    def clear(self):
        self.inbox.clear()
        self.room_log.clear()


WORDS = ["cat", "dog", "ice cream", "t-rex", "apple"]


@pytest.fixture()
def settings():
    return GameSettings(
        round_duration_sec=90,
        word_choices_count=3,
        choose_duration_sec=15,
        round_end_pause_sec=3,
        correct_guess_score=100,
        max_players_per_room=4,
    )


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def registry(broadcaster, scheduler, settings):
    reg = RoomRegistry(broadcaster, scheduler, settings=settings, words=WORDS)
    yield reg
    reg.close()


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    LOG_LEVEL = "debug"
    TRUST_PROXY_HEADERS = False
    CORS_ORIGINS = "*"
    ROUND_DURATION_SEC = 90
    WORD_CHOICES_COUNT = 3
    CHOOSE_DURATION_SEC = 15
    ROUND_END_PAUSE_SEC = 3
    CORRECT_GUESS_SCORE = 100
    MAX_PLAYERS_PER_ROOM = 10


@pytest.fixture()
def app_and_socketio(scheduler):
    application, socketio = create_app(TestConfig, scheduler=scheduler)
    yield application, socketio
    application.extensions["doodle.registry"].close()


@pytest.fixture()
def make_client(app_and_socketio):
    application, socketio = app_and_socketio
    clients = []

    def _make():
        client = socketio.test_client(application, flask_test_client=application.test_client())
        clients.append(client)
        return client

    yield _make
    for client in clients:
        if client.is_connected():
            client.disconnect()
