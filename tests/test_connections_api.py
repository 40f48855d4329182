from sqlalchemy import select

from agrosphere.modules.notifications.models import Notification
from conftest import auth_headers


def test_request_and_accept_over_http(client, db, make_user):
    make_user(1, name="Asha")
    make_user(2, name="Bilal")

    resp = client.post("/user-connections", json={"receiver_id": 2}, headers=auth_headers(1))
    assert resp.status_code == 201
    conn = resp.json()
    assert conn["status"] == "pending"

    requests = client.get("/user-connections/requests", headers=auth_headers(2)).json()
    assert requests["sent"] == []
    assert [r["user_id"] for r in requests["received"]] == [1]

    resp = client.patch(f"/user-connections/{conn['id']}", json={"status": "accepted"}, headers=auth_headers(2))
    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"

    friends = client.get("/user-connections", headers=auth_headers(1)).json()
    assert [(f["user_id"], f["name"]) for f in friends] == [(2, "Bilal")]

    kinds = db.scalars(select(Notification.kind).order_by(Notification.id)).all()
    assert kinds == ["connection_request", "connection_accepted"]


def test_request_errors_over_http(client, make_user):
    make_user(1)
    make_user(2)

    resp = client.post("/user-connections", json={"receiver_id": 1}, headers=auth_headers(1))
    assert resp.status_code == 400

    assert client.post("/user-connections", json={"receiver_id": 2}, headers=auth_headers(1)).status_code == 201
    resp = client.post("/user-connections", json={"receiver_id": 1}, headers=auth_headers(2))
    assert resp.status_code == 409
    assert resp.json()["kind"] == "conflict"


def test_respond_by_requester_is_not_found(client, make_user):
    make_user(1)
    make_user(2)
    conn = client.post("/user-connections", json={"receiver_id": 2}, headers=auth_headers(1)).json()

    resp = client.patch(f"/user-connections/{conn['id']}", json={"status": "accepted"}, headers=auth_headers(1))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Connection request not found or unauthorized"

    resp = client.get("/user-connections/requests?direction=sideways", headers=auth_headers(1))
    assert resp.status_code == 400
