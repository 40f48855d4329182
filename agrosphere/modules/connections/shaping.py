"""
Flat connection rows -> per-viewer friend info.

A connection row carries both sides (``requester_*`` and ``receiver_*``
columns). ``resolve_other_party`` picks the side that is not the viewer, so
callers never branch on who sent the request.
"""
from typing import Any, Mapping

from agrosphere.schemas.connections import FriendInfo
from agrosphere.schemas.enums import RequestDirection

PARTY_FIELDS = ("id", "name", "area", "city", "country")


def pair_low_high(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def resolve_other_party(row: Mapping[str, Any], viewer_id: int) -> FriendInfo:
    if row["requester_id"] == viewer_id:
        side, direction = "receiver", RequestDirection.sent
    elif row["receiver_id"] == viewer_id:
        side, direction = "requester", RequestDirection.received
    else:
        raise ValueError(f"user {viewer_id} is not part of connection {row['id']}")

    other = {field: row[f"{side}_{field}"] for field in PARTY_FIELDS}

    return FriendInfo(
        connection_id=row["id"],
        status=row["status"],
        direction=direction,
        user_id=other["id"],
        name=other["name"],
        area=other["area"],
        city=other["city"],
        country=other["country"],
        created_at=row["created_at"],
    )
