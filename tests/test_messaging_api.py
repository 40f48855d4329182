from conftest import auth_headers


def _setup(make_user):
    make_user(1, name="Asha")
    make_user(2, name="Bilal")
    make_user(3, name="Chen")


def test_open_conversation_created_then_existing(client, make_user):
    _setup(make_user)

    resp = client.post("/messages/conversations", json={"participant_id": 2}, headers=auth_headers(1))
    assert resp.status_code == 201
    body = resp.json()
    assert body["participant_ids"] == [1, 2]

    resp = client.post("/messages/conversations", json={"participant_id": 1}, headers=auth_headers(2))
    assert resp.status_code == 200
    assert resp.json()["id"] == body["id"]


def test_open_conversation_with_missing_user(client, make_user):
    _setup(make_user)
    resp = client.post("/messages/conversations", json={"participant_id": 42}, headers=auth_headers(1))
    assert resp.status_code == 404
    assert resp.json()["kind"] == "not_found"


def test_send_and_read_flow(client, make_user):
    _setup(make_user)
    convo_id = client.post(
        "/messages/conversations", json={"participant_id": 2}, headers=auth_headers(1)
    ).json()["id"]

    resp = client.post("/messages", json={"conversation_id": convo_id, "content": " Hello "}, headers=auth_headers(1))
    assert resp.status_code == 201
    assert resp.json()["content"] == "Hello"
    assert resp.json()["sender_name"] == "Asha"

    convos = client.get("/messages/conversations", headers=auth_headers(2)).json()
    assert convos[0]["unread_count"] == 1
    assert convos[0]["last_message_content"] == "Hello"
    assert client.get("/messages/unread-count", headers=auth_headers(2)).json() == {"unread_count": 1}

    resp = client.patch(f"/messages/conversations/{convo_id}/read", headers=auth_headers(2))
    assert resp.json() == {"updated": 1}

    messages = client.get(f"/messages/conversations/{convo_id}", headers=auth_headers(2)).json()
    assert [m["is_read"] for m in messages] == [True]


def test_message_errors(client, make_user):
    _setup(make_user)
    convo_id = client.post(
        "/messages/conversations", json={"participant_id": 2}, headers=auth_headers(1)
    ).json()["id"]

    resp = client.post("/messages", json={"conversation_id": convo_id, "content": "   "}, headers=auth_headers(1))
    assert resp.status_code == 400
    assert resp.json()["kind"] == "validation_error"

    resp = client.post("/messages", json={"conversation_id": convo_id}, headers=auth_headers(1))
    assert resp.status_code == 400

    resp = client.post("/messages", json={"conversation_id": convo_id, "content": "hi"}, headers=auth_headers(3))
    assert resp.status_code == 403

    resp = client.get(f"/messages/conversations/{convo_id}", headers=auth_headers(3))
    assert resp.status_code == 403
    assert resp.json()["kind"] == "forbidden"


def test_messages_require_identity(client, make_user):
    _setup(make_user)
    assert client.get("/messages/conversations").status_code == 401
    resp = client.get("/messages/conversations", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
