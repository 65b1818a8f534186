"""
Tests for the Socket.IO channel: handshake auth, match rooms and broadcasts.
"""
from unittest.mock import patch

import pytest


def _token(headers):
    return headers["Authorization"].split(" ", 1)[1]


@pytest.fixture
def socketio(app):
    return app.extensions["socketio"]


@pytest.fixture
def match(client, make_user, make_dog):
    alice_id, alice = make_user("Alice")
    _, bob = make_user("Bob")
    rex = make_dog(alice, name="Rex")
    luna = make_dog(bob, name="Luna")
    created = client.post('/api/matches', json={"dog1Id": rex["id"], "dog2Id": luna["id"]}, headers=alice)
    return {"id": created.get_json()["id"], "alice": alice, "bob": bob}


def test_connect_with_valid_token(app, socketio, make_user):
    user_id, headers = make_user()

    sio = socketio.test_client(app, auth={"token": _token(headers)})

    assert sio.is_connected()
    assert user_id in app.extensions["realtime"].connections.values()
    sio.disconnect()


def test_connect_without_token_rejected(app, socketio):
    sio = socketio.test_client(app)
    assert not sio.is_connected()


def test_connect_with_forged_token_rejected(app, socketio):
    sio = socketio.test_client(app, auth={"token": "forged"})
    assert not sio.is_connected()


def test_participant_joins_and_receives_messages(app, client, socketio, match):
    sio = socketio.test_client(app, auth={"token": _token(match["bob"])})

    ack = sio.emit("joinMatch", match["id"], callback=True)
    assert ack == {"status": "ok", "matchId": match["id"]}

    sent = client.post('/api/messages', json={"matchId": match["id"], "content": "Woof"},
                       headers=match["alice"]).get_json()

    events = [e for e in sio.get_received() if e["name"] == "newMessage"]
    assert len(events) == 1
    assert events[0]["args"][0] == sent


def test_non_participant_cannot_join(app, client, socketio, match, make_user):
    _, carol = make_user("Carol")
    sio = socketio.test_client(app, auth={"token": _token(carol)})

    ack = sio.emit("joinMatch", match["id"], callback=True)

    assert ack["status"] == "error"
    errors = [e for e in sio.get_received() if e["name"] == "error"]
    assert errors[0]["args"][0]["matchId"] == match["id"]

    client.post('/api/messages', json={"matchId": match["id"], "content": "Woof"}, headers=match["alice"])
    assert [e for e in sio.get_received() if e["name"] == "newMessage"] == []


def test_join_with_path_like_id_rejected(app, socketio, match):
    sio = socketio.test_client(app, auth={"token": _token(match["bob"])})

    with patch('dogmatch.services.match_service.MatchService.is_participant') as is_participant:
        ack = sio.emit("joinMatch", f"{match['id']}/messages", callback=True)

    assert ack["status"] == "error"
    is_participant.assert_not_called()
    errors = [e for e in sio.get_received() if e["name"] == "error"]
    assert errors[0]["args"][0]["event"] == "joinMatch"


def test_leave_with_invalid_id_rejected(app, socketio, match):
    sio = socketio.test_client(app, auth={"token": _token(match["bob"])})

    ack = sio.emit("leaveMatch", "a/b", callback=True)

    assert ack["status"] == "error"


def test_leave_match_stops_broadcasts(app, client, socketio, match):
    sio = socketio.test_client(app, auth={"token": _token(match["bob"])})
    sio.emit("joinMatch", match["id"], callback=True)
    sio.emit("leaveMatch", match["id"], callback=True)

    client.post('/api/messages', json={"matchId": match["id"], "content": "Woof"}, headers=match["alice"])

    assert [e for e in sio.get_received() if e["name"] == "newMessage"] == []


def test_status_change_broadcasts_match_update(app, client, socketio, match):
    sio = socketio.test_client(app, auth={"token": _token(match["alice"])})
    sio.emit("joinMatch", match["id"], callback=True)

    client.put(f"/api/matches/{match['id']}/status", json={"status": "accepted"}, headers=match["bob"])

    updates = [e for e in sio.get_received() if e["name"] == "matchUpdate"]
    assert updates[0]["args"][0]["status"] == "accepted"
