from datetime import datetime

import pytest

from agrosphere.modules.connections.shaping import pair_low_high, resolve_other_party


def _row(**overrides):
    row = {
        "id": 7,
        "status": "accepted",
        "created_at": datetime(2026, 3, 1, 9, 30),
        "requester_id": 1,
        "requester_name": "Asha",
        "requester_area": "Niphad",
        "requester_city": "Nashik",
        "requester_country": "India",
        "receiver_id": 2,
        "receiver_name": "Bilal",
        "receiver_area": None,
        "receiver_city": "Pune",
        "receiver_country": "India",
    }
    row.update(overrides)
    return row


def test_requester_sees_receiver():
    info = resolve_other_party(_row(), viewer_id=1)

    assert info.user_id == 2
    assert info.name == "Bilal"
    assert info.city == "Pune"
    assert info.area is None
    assert info.direction == "sent"
    assert info.connection_id == 7


def test_receiver_sees_requester():
    info = resolve_other_party(_row(status="pending"), viewer_id=2)

    assert info.user_id == 1
    assert info.area == "Niphad"
    assert info.direction == "received"
    assert info.status == "pending"


def test_outsider_is_rejected():
    with pytest.raises(ValueError):
        resolve_other_party(_row(), viewer_id=3)


def test_pair_low_high_is_order_independent():
    assert pair_low_high(9, 4) == pair_low_high(4, 9) == (4, 9)
