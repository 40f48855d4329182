from typing import Optional

from loguru import logger
from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from agrosphere.core.errors import ValidationError
from agrosphere.modules.connections.models import Connection
from agrosphere.modules.users.models import User
from agrosphere.modules.users.service import get_user
from agrosphere.schemas.enums import RequestDirection
from .filters import any_of, location_match_specs, text_search_specs


def _direction(requester_id: Optional[int], viewer_id: int) -> Optional[RequestDirection]:
    if requester_id is None:
        return None
    return RequestDirection.sent if requester_id == viewer_id else RequestDirection.received


def _discover(db: Session, viewer_id: int, match_clause, limit: int):
    stmt = (
        select(
            User.id,
            User.name,
            User.area,
            User.city,
            User.country,
            Connection.id.label("connection_id"),
            Connection.status.label("connection_status"),
            Connection.requester_id,
        )
        .outerjoin(
            Connection,
            or_(
                and_(Connection.requester_id == viewer_id, Connection.receiver_id == User.id),
                and_(Connection.requester_id == User.id, Connection.receiver_id == viewer_id),
            ),
        )
        .where(
            User.id != viewer_id,
            User.is_banned.is_(False),
            match_clause,
        )
        .order_by(User.name.asc(), User.id.asc())
        .limit(limit)
    )

    results = []
    for row in db.execute(stmt).mappings():
        item = dict(row)
        item["request_direction"] = _direction(item.pop("requester_id"), viewer_id)
        results.append(item)
    return results


def match_by_location(db: Session, viewer_id: int, limit: int = 50):
    viewer = get_user(db, viewer_id)
    if not viewer.has_location:
        return []

    clause = any_of(location_match_specs(viewer.area, viewer.city))
    results = _discover(db, viewer_id, clause, limit)

    logger.debug(f"Location match | user={viewer_id} results={len(results)}")
    return results


def search_users(db: Session, viewer_id: int, q: Optional[str], include_name: bool = False, limit: int = 50):
    if not q or not q.strip():
        raise ValidationError("Search query is required")

    viewer = get_user(db, viewer_id)
    if not viewer.has_location:
        return []

    clause = any_of(text_search_specs(q, include_name=include_name))
    results = _discover(db, viewer_id, clause, limit)

    logger.debug(f"User search | user={viewer_id} q={q!r} results={len(results)}")
    return results
