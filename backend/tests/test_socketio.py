import logging


def _events(client, name):
    return [pkt["args"][0] if pkt["args"] else None for pkt in client.get_received() if pkt["name"] == name]


def _split(received, name):
    return [pkt["args"][0] if pkt["args"] else None for pkt in received if pkt["name"] == name]


def _join(client, username, room_code="R1"):
    client.emit("joinRoom", {"username": username, "roomCode": room_code})
    return client.get_received()


def test_index_page(app_and_socketio):
    application, _ = app_and_socketio
    res = application.test_client().get("/")
    assert res.status_code == 200
    assert b"socket.io" in res.data


def test_join_rejections_go_to_the_sender_only(make_client):
    alice = make_client()
    _join(alice, "alice")

    impostor = make_client()
    received = _join(impostor, "alice")
    assert _split(received, "error") == [{"message": "Username already taken in this room. Please choose another."}]
    assert alice.get_received() == []

    nameless = make_client()
    received = _join(nameless, "  ")
    assert _split(received, "error") == [{"message": "Username and Room ID are required."}]


def test_two_player_round(make_client, scheduler):
    alice = make_client()
    received = _join(alice, "alice")
    choices = _split(received, "yourTurnToChooseWord")[-1]
    assert len(choices) == 3

    bob = make_client()
    received = _join(bob, "bob")
    roster = _split(received, "updatePlayers")[-1]
    assert [(p["username"], p["isDrawer"]) for p in roster] == [("alice", True), ("bob", False)]
    assert "score" in roster[0] and "guessed_this_round" not in roster[0]
    sync = _split(received, "roundStart")
    assert len(sync) == 1 and sync[0]["drawerId"] == roster[0]["id"]
    alice.get_received()

    alice.emit("wordChosen", {"roomCode": "R1", "word": choices[0]})
    start = _split(bob.get_received(), "roundStart")[-1]
    assert start["timer"] == 90
    assert start["wordHint"].count("_") == sum(c.isalpha() for c in choices[0])

    alice.emit("drawing", {"roomCode": "R1", "x": 10, "y": 20})
    bob.emit("drawing", {"roomCode": "R1", "x": 99, "y": 99})
    assert _events(bob, "drawing") == [{"x": 10.0, "y": 20.0}]
    assert _events(alice, "drawing") == []

    bob.emit("chatMessage", {"roomCode": "R1", "message": "not it"})
    bob.emit("chatMessage", {"roomCode": "R1", "message": f"  {choices[0].upper()} "})
    bob.emit("chatMessage", {"roomCode": "R1", "message": choices[0]})

    received = alice.get_received()
    assert _split(received, "newGuess") == [{"username": "bob", "guess": "not it"}]
    assert _split(received, "correctGuess") == [{"username": "bob", "word": choices[0], "score": 100}]
    assert _split(received, "roundEnd") == [{"message": "bob guessed the word!"}]
    assert None in _split(received, "clearCanvas")

    scheduler.advance(3)
    assert len(_events(bob, "yourTurnToChooseWord")) == 1


def test_unauthorized_requests_get_error(make_client):
    alice = make_client()
    choices = _split(_join(alice, "alice"), "yourTurnToChooseWord")[-1]
    bob = make_client()
    _join(bob, "bob")

    bob.emit("wordChosen", {"roomCode": "R1", "word": choices[0]})
    assert _events(bob, "error") == [{"message": "Not authorized to choose a word."}]

    bob.emit("clearCanvas", "R1")
    assert _events(bob, "error") == [{"message": "Only the drawer can clear the canvas."}]


def test_events_for_other_rooms_are_ignored(make_client):
    alice = make_client()
    _join(alice, "alice")
    alice.get_received()

    alice.emit("chatMessage", {"roomCode": "elsewhere", "message": "hi"})
    alice.emit("drawing", {"roomCode": "elsewhere", "x": 1, "y": 1})
    alice.emit("wordChosen", {"roomCode": "elsewhere", "word": "cat"})
    assert alice.get_received() == []


def test_drawer_disconnect_ends_round(make_client, scheduler):
    alice = make_client()
    choices = _split(_join(alice, "alice"), "yourTurnToChooseWord")[-1]
    bob = make_client()
    _join(bob, "bob")
    carol = make_client()
    _join(carol, "carol")
    alice.emit("wordChosen", {"roomCode": "R1", "word": choices[0]})
    bob.get_received()

    alice.disconnect()
    received = bob.get_received()
    assert _split(received, "playerLeft") == ["alice"]
    assert _split(received, "roundEnd") == [{"message": "The drawer left the game."}]

    scheduler.advance(3)
    roster = _events(bob, "updatePlayers")[-1]
    assert [p["username"] for p in roster if p["isDrawer"]] == ["bob"]


def test_last_player_leaving_destroys_room(make_client, app_and_socketio, scheduler):
    application, _ = app_and_socketio
    registry = application.extensions["doodle.registry"]

    alice = make_client()
    _join(alice, "alice")
    alice.emit("leaveRoom", {"roomCode": "R1"})

    assert registry.get("R1") is None
    assert scheduler.pending == []

    # A fresh join after leaving is accepted.
    received = _join(alice, "alice")
    assert _split(received, "error") == []
    assert registry.get("R1") is not None


def test_log_level_comes_from_config(app_and_socketio):
    application, _ = app_and_socketio
    assert application.config["LOG_LEVEL"] == "debug"
    assert logging.getLogger("doodle").level == logging.DEBUG
