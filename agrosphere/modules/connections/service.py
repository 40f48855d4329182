from loguru import logger
from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from agrosphere.core.db import utcnow
from agrosphere.core.errors import ConflictError, NotFoundError, ValidationError
from agrosphere.modules.notifications.dispatcher import Notifier, safe_notify
from agrosphere.modules.users.models import User
from agrosphere.schemas.enums import ConnectionStatus, NotificationKind, RequestDirection
from .models import Connection
from .shaping import PARTY_FIELDS, pair_low_high, resolve_other_party

RESPONSE_DECISIONS = (ConnectionStatus.accepted.value, ConnectionStatus.rejected.value)


# ---------- REQUESTS ----------

def send_request(
    db: Session,
    requester_id: int,
    receiver_id: int,
    notifier: Notifier | None = None,
) -> Connection:
    if requester_id == receiver_id:
        raise ValidationError("You cannot send a connection request to yourself")

    requester = db.get(User, requester_id)
    if not requester:
        raise NotFoundError("User not found")

    receiver = db.get(User, receiver_id)
    if not receiver or receiver.is_banned:
        raise NotFoundError("User not found")

    low, high = pair_low_high(requester_id, receiver_id)

    # any prior row blocks a new request, including a rejected one
    existing = db.scalars(
        select(Connection).where(
            Connection.user_low == low,
            Connection.user_high == high,
        )
    ).first()
    if existing:
        raise ConflictError("Connection request already exists")

    now = utcnow()
    conn = Connection(
        requester_id=requester_id,
        receiver_id=receiver_id,
        user_low=low,
        user_high=high,
        status=ConnectionStatus.pending.value,
        created_at=now,
        updated_at=now,
    )
    db.add(conn)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Connection request already exists")
    db.refresh(conn)

    logger.info(f"Connection requested | id={conn.id} requester={requester_id} receiver={receiver_id}")

    safe_notify(
        notifier,
        receiver_id,
        NotificationKind.connection_request.value,
        f"{requester.name} sent you a connection request",
    )
    return conn


def respond(
    db: Session,
    connection_id: int,
    responder_id: int,
    decision: str,
    notifier: Notifier | None = None,
) -> Connection:
    decision = (decision or "").strip().lower()
    if decision not in RESPONSE_DECISIONS:
        raise ValidationError("status must be 'accepted' or 'rejected'")

    # single conditional update: only one concurrent responder can win
    result = db.execute(
        update(Connection)
        .where(
            Connection.id == connection_id,
            Connection.receiver_id == responder_id,
            Connection.status == ConnectionStatus.pending.value,
        )
        .values(status=decision, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise NotFoundError("Connection request not found or unauthorized")

    db.commit()
    conn = db.get(Connection, connection_id)

    logger.info(f"Connection {decision} | id={connection_id} responder={responder_id}")

    if decision == ConnectionStatus.accepted.value:
        responder = db.get(User, responder_id)
        safe_notify(
            notifier,
            conn.requester_id,
            NotificationKind.connection_accepted.value,
            f"{responder.name if responder else 'A user'} accepted your connection request",
        )
    return conn


# ---------- LISTING ----------

def _connection_rows(db: Session, user_id: int, *conditions):
    requester = aliased(User, name="requester")
    receiver = aliased(User, name="receiver")

    columns = [Connection.id, Connection.status, Connection.created_at]
    for prefix, party in (("requester", requester), ("receiver", receiver)):
        columns.extend(getattr(party, f).label(f"{prefix}_{f}") for f in PARTY_FIELDS)

    stmt = (
        select(*columns)
        .join(requester, requester.id == Connection.requester_id)
        .join(receiver, receiver.id == Connection.receiver_id)
        .where(
            or_(
                and_(Connection.requester_id == user_id, receiver.is_banned.is_(False)),
                and_(Connection.receiver_id == user_id, requester.is_banned.is_(False)),
            ),
            *conditions,
        )
        .order_by(Connection.updated_at.desc(), Connection.id.desc())
    )
    return db.execute(stmt).mappings().all()


def list_connections_for_user(db: Session, user_id: int):
    rows = _connection_rows(db, user_id, Connection.status == ConnectionStatus.accepted.value)
    return [resolve_other_party(row, user_id) for row in rows]


def list_requests_for_user(db: Session, user_id: int, direction: str):
    if direction == RequestDirection.sent.value:
        side = Connection.requester_id == user_id
    elif direction == RequestDirection.received.value:
        side = Connection.receiver_id == user_id
    else:
        raise ValidationError("direction must be 'sent' or 'received'")

    rows = _connection_rows(db, user_id, side, Connection.status == ConnectionStatus.pending.value)
    return [resolve_other_party(row, user_id) for row in rows]
