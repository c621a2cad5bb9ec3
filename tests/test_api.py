"""
End-to-end tests through the HTTP and WebSocket surface.
"""
import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import PASSWORD


def signup(client, name):
    """Register a user and return (user, auth headers). The cookie jar is left empty."""
    response = client.post(
        "/signup",
        json={"name": name, "email": f"{name.lower()}@example.com", "password": PASSWORD},
    )
    assert response.status_code == 201, response.text
    client.cookies.clear()
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}, body["token"]


def create_board(client, headers, title="Sprint"):
    response = client.post("/board/create", json={"title": title}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_list(client, headers, board_id, title, order=None):
    payload = {"title": title, "boardId": board_id}
    if order is not None:
        payload["order"] = order
    response = client.post("/list/create", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_task(client, headers, list_id, title, order=None):
    payload = {"title": title, "listId": list_id}
    if order is not None:
        payload["order"] = order
    response = client.post("/task/create", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Auth
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_cookie_session_lifecycle(client):
    response = client.post(
        "/signup",
        json={"name": "Alice", "email": "alice@example.com", "password": PASSWORD},
    )
    assert response.status_code == 201
    assert "token" in response.cookies

    profile = client.get("/profile")
    assert profile.status_code == 200
    assert profile.json()["email"] == "alice@example.com"

    assert client.post("/logout").json() == {"message": "Logged out"}
    assert client.get("/profile").status_code == 401

    login = client.post("/login", json={"email": "ALICE@example.com", "password": PASSWORD})
    assert login.status_code == 200
    assert client.get("/profile").status_code == 200


def test_signup_validation_is_400(client):
    response = client.post(
        "/signup", json={"name": "Weak", "email": "weak@example.com", "password": "password"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_duplicate_signup_is_409(client):
    signup(client, "Alice")
    response = client.post(
        "/signup",
        json={"name": "Alice", "email": "Alice@example.com", "password": PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "DuplicateResourceError"


def test_login_errors_do_not_reveal_accounts(client):
    signup(client, "Alice")
    unknown = client.post("/login", json={"email": "ghost@example.com", "password": PASSWORD})
    wrong = client.post("/login", json={"email": "alice@example.com", "password": "Nope-123!"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


def test_requests_without_session_are_401(client):
    assert client.get("/boards").status_code == 401
    bad = client.get("/boards", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401
    assert bad.json()["error"] == "AuthenticationError"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Boards, lists, tasks
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_forbidden_and_missing_are_distinct(client):
    _, alice, _ = signup(client, "Alice")
    _, bob, _ = signup(client, "Bob")
    board = create_board(client, alice)

    forbidden = client.get(f"/board/{board['id']}", headers=bob)
    missing = client.get(f"/board/{'0' * 32}", headers=bob)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "AuthorizationError"
    assert missing.status_code == 404
    assert missing.json()["error"] == "ResourceNotFoundError"


def test_membership_endpoints(client):
    alice_user, alice, _ = signup(client, "Alice")
    bob_user, bob, _ = signup(client, "Bob")
    board = create_board(client, alice)

    added = client.post(
        f"/board/{board['id']}/addMember", json={"email": bob_user["email"]}, headers=alice
    )
    assert added.status_code == 200
    assert {m["id"] for m in added.json()["members"]} == {alice_user["id"], bob_user["id"]}

    remove_owner = client.delete(
        f"/board/{board['id']}/removeMember/{alice_user['id']}", headers=alice
    )
    assert remove_owner.status_code == 400

    left = client.delete(f"/board/{board['id']}/removeMember/{bob_user['id']}", headers=bob)
    assert left.status_code == 200
    assert [m["id"] for m in left.json()["members"]] == [alice_user["id"]]


def test_task_endpoints(client):
    alice_user, alice, _ = signup(client, "Alice")
    bob_user, bob, _ = signup(client, "Bob")
    board = create_board(client, alice)
    client.post(f"/board/{board['id']}/addMember", json={"email": bob_user["email"]}, headers=alice)
    todo = create_list(client, alice, board["id"], "Todo")
    task = create_task(client, alice, todo["id"], "Write spec")

    assigned = client.patch(f"/task/{task['id']}/assign", json={"userId": bob_user["id"]}, headers=bob)
    assert assigned.status_code == 200
    assert {u["id"] for u in assigned.json()["assignedUsers"]} == {alice_user["id"], bob_user["id"]}

    edited = client.patch(f"/task/edit/{task['id']}", json={"title": "Write tests"}, headers=bob)
    assert edited.json()["title"] == "Write tests"

    listed = client.get(f"/tasks/{todo['id']}", headers=alice).json()
    assert [t["title"] for t in listed] == ["Write tests"]

    assert client.patch(f"/task/edit/{task['id']}", json={}, headers=alice).status_code == 400
    assert client.delete(f"/task/del/{task['id']}", headers=alice).json() == {
        "message": "Task deleted"
    }
    assert client.get(f"/tasks/{todo['id']}", headers=alice).json() == []


def test_resequence_endpoints(client):
    _, alice, _ = signup(client, "Alice")
    board = create_board(client, alice)
    first = create_list(client, alice, board["id"], "First", order=5)
    create_list(client, alice, board["id"], "Second", order=5)
    create_task(client, alice, first["id"], "A", order=9)
    create_task(client, alice, first["id"], "B", order=9)

    lists = client.post(f"/lists/{board['id']}/resequence", headers=alice).json()
    assert [(item["title"], item["order"]) for item in lists] == [("First", 0), ("Second", 1)]
    tasks = client.post(f"/tasks/{first['id']}/resequence", headers=alice).json()
    assert [(t["title"], t["order"]) for t in tasks] == [("A", 0), ("B", 1)]

    renamed = client.patch(f"/list/edit/{first['id']}", json={"title": "Backlog"}, headers=alice)
    assert renamed.json()["title"] == "Backlog"
    assert client.delete(f"/list/del/{first['id']}", headers=alice).status_code == 200
    assert [item["title"] for item in client.get(f"/lists/{board['id']}", headers=alice).json()] == [
        "Second"
    ]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Realtime
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_websocket_rejects_unauthenticated(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws"):
            pass
    assert exc_info.value.code == 1008

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws", headers={"Authorization": "Bearer forged"}):
            pass
    assert exc_info.value.code == 1008


def test_websocket_ignores_token_in_query_string(client):
    _, _, token = signup(client, "Alice")

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(f"/ws?token={token}"):
            pass
    assert exc_info.value.code == 1008


def test_websocket_commands(client):
    _, alice, _ = signup(client, "Alice")
    _, bob, _ = signup(client, "Bob")
    board = create_board(client, alice)

    with client.websocket_connect("/ws", headers=bob) as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_json({"type": "join", "boardId": board["id"]})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["error"] == "AuthorizationError"

        ws.send_json({"type": "join"})
        assert ws.receive_json()["error"] == "ValidationError"

        ws.send_text("{not json")
        assert ws.receive_json()["detail"] == "Malformed message"


def test_sprint_scenario(client):
    """Create, share, plan and move a task while a subscriber watches the board"""
    alice_user, alice, _ = signup(client, "Alice")
    bob_user, bob, _ = signup(client, "Bob")

    board = create_board(client, alice)
    shared = client.post(
        f"/board/{board['id']}/addMember", json={"email": "bob@example.com"}, headers=alice
    ).json()
    assert bob_user["id"] in [m["id"] for m in shared["members"]]

    todo = create_list(client, alice, board["id"], "Todo", order=0)
    task = create_task(client, alice, todo["id"], "Write spec", order=0)
    assert [u["id"] for u in task["assignedUsers"]] == [alice_user["id"]]
    done = create_list(client, alice, board["id"], "Done")

    with client.websocket_connect("/ws", headers=alice) as ws:
        ws.send_json({"type": "join", "boardId": board["id"]})
        assert ws.receive_json() == {"type": "joined", "boardId": board["id"]}

        moved = client.patch(f"/task/edit/{task['id']}", json={"listId": done["id"]}, headers=bob)
        assert moved.status_code == 200
        assert moved.json()["listId"] == done["id"]

        event = ws.receive_json()
        assert event["type"] == "activityAdded"
        assert event["boardId"] == board["id"]
        assert event["data"]["action"] == 'Bob moved task "Write spec" from "Todo" to "Done"'

        # Nothing else was queued ahead of the pong
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

    activity = client.get(f"/activity/{board['id']}", headers=alice).json()
    assert activity[0]["action"].startswith("Bob moved task")
    assert activity[0]["taskId"] == task["id"]

    deleted = client.delete(f"/board/del/{board['id']}", headers=alice)
    assert deleted.json() == {"message": "Board deleted"}
    assert client.get(f"/lists/{board['id']}", headers=alice).status_code == 404
    assert client.get(f"/tasks/{todo['id']}", headers=alice).status_code == 404
    assert client.get(f"/activity/{board['id']}", headers=alice).status_code == 404
    assert client.get("/boards", headers=alice).json() == []
