"""
Conversation access layer.

Two-user conversations are found by participant set (count-based match) and
carry a unique ``pair_key`` so concurrent find-or-create calls for the same
pair converge on one row.
"""
from typing import Optional

from loguru import logger
from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from agrosphere.core.db import utcnow
from agrosphere.core.errors import AuthorizationError, NotFoundError, ValidationError
from agrosphere.modules.connections.shaping import pair_low_high
from agrosphere.modules.users.models import User
from .models import Conversation, ConversationParticipant, Message


def pair_key(a: int, b: int) -> str:
    low, high = pair_low_high(a, b)
    return f"{low}:{high}"


# ---------- CONVERSATIONS ----------

def _find_pair_conversation(db: Session, a: int, b: int) -> Optional[Conversation]:
    member = ConversationParticipant.user_id.in_([a, b])
    has_a = aliased(ConversationParticipant, name="has_a")
    with_a = select(has_a.conversation_id).where(has_a.user_id == a)
    matched = (
        select(ConversationParticipant.conversation_id)
        .where(ConversationParticipant.conversation_id.in_(with_a))
        .group_by(ConversationParticipant.conversation_id)
        .having(func.count(ConversationParticipant.id) == 2)
        .having(func.sum(case((member, 1), else_=0)) == 2)
    )
    return db.scalars(
        select(Conversation)
        .where(Conversation.id.in_(matched))
        .order_by(Conversation.id)
    ).first()


def add_participant(db: Session, conversation_id: int, user_id: int) -> bool:
    """Returns True when a row was inserted; re-adding is a no-op."""
    exists = db.scalars(
        select(ConversationParticipant.id).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id == user_id,
        )
    ).first()
    if exists:
        return False

    try:
        with db.begin_nested():
            db.add(ConversationParticipant(conversation_id=conversation_id, user_id=user_id))
    except IntegrityError:
        return False
    return True


def find_or_create_conversation(db: Session, user_a: int, user_b: int) -> tuple[Conversation, bool]:
    if user_a == user_b:
        raise ValidationError("A conversation needs two different users")

    for uid in (user_a, user_b):
        if db.get(User, uid) is None:
            raise NotFoundError("User not found")

    convo = _find_pair_conversation(db, user_a, user_b)
    if convo:
        return convo, False

    key = pair_key(user_a, user_b)
    convo = Conversation(pair_key=key)
    db.add(convo)
    try:
        db.flush()
    except IntegrityError:
        # lost the race: another request created the pair first
        db.rollback()
        convo = db.scalars(select(Conversation).where(Conversation.pair_key == key)).one()
        add_participant(db, convo.id, user_a)
        add_participant(db, convo.id, user_b)
        db.commit()
        return convo, False

    add_participant(db, convo.id, user_a)
    add_participant(db, convo.id, user_b)
    db.commit()
    db.refresh(convo)

    logger.info(f"Conversation created | id={convo.id} users={key}")
    return convo, True


def participant_ids(db: Session, conversation_id: int) -> list[int]:
    return list(
        db.scalars(
            select(ConversationParticipant.user_id)
            .where(ConversationParticipant.conversation_id == conversation_id)
            .order_by(ConversationParticipant.user_id)
        )
    )


def is_participant(db: Session, conversation_id: int, user_id: int) -> bool:
    return db.scalars(
        select(ConversationParticipant.id).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id == user_id,
        )
    ).first() is not None


def require_participant(db: Session, conversation_id: int, user_id: int) -> None:
    if not is_participant(db, conversation_id, user_id):
        raise AuthorizationError("You are not a participant of this conversation")


# ---------- MESSAGES ----------

def _message_rows(db: Session, *conditions):
    return (
        select(
            Message.id,
            Message.conversation_id,
            Message.sender_id,
            User.name.label("sender_name"),
            Message.content,
            Message.is_read,
            Message.created_at,
        )
        .join(User, User.id == Message.sender_id)
        .where(*conditions)
    )


def append_message(db: Session, conversation_id: int, sender_id: int, content: Optional[str]):
    content = (content or "").strip()
    if not content:
        raise ValidationError("Message content cannot be empty")

    require_participant(db, conversation_id, sender_id)

    now = utcnow()
    msg = Message(
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        is_read=False,
        created_at=now,
    )
    db.add(msg)
    db.execute(
        update(Conversation)
        .where(Conversation.id == conversation_id)
        .values(last_message_at=now)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    logger.info(f"Message sent | conversation={conversation_id} sender={sender_id} id={msg.id}")
    return dict(db.execute(_message_rows(db, Message.id == msg.id)).mappings().one())


def list_messages(db: Session, conversation_id: int, limit: int = 50, offset: int = 0):
    stmt = (
        _message_rows(db, Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .limit(limit)
        .offset(offset)
    )
    return [dict(row) for row in db.execute(stmt).mappings()]


def mark_read(db: Session, conversation_id: int, reader_id: int) -> int:
    result = db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_id != reader_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    if result.rowcount:
        logger.info(f"Messages read | conversation={conversation_id} reader={reader_id} count={result.rowcount}")
    return result.rowcount


# ---------- CONVERSATION LIST ----------

def list_conversations_for_user(db: Session, user_id: int, limit: int = 20, offset: int = 0):
    mine = aliased(ConversationParticipant, name="mine")
    other = aliased(ConversationParticipant, name="other")

    latest = (
        select(Message.content, Message.created_at)
        .where(Message.conversation_id == Conversation.id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(1)
        .correlate(Conversation)
    )
    last_content = latest.with_only_columns(Message.content).scalar_subquery()
    last_created = latest.with_only_columns(Message.created_at).scalar_subquery()

    unread = (
        select(func.count(Message.id))
        .where(
            Message.conversation_id == Conversation.id,
            Message.sender_id != user_id,
            Message.is_read.is_(False),
        )
        .correlate(Conversation)
        .scalar_subquery()
    )

    stmt = (
        select(
            Conversation.id.label("conversation_id"),
            Conversation.created_at,
            Conversation.last_message_at,
            last_content.label("last_message_content"),
            last_created.label("last_message_created_at"),
            unread.label("unread_count"),
            other.user_id.label("other_user_id"),
            User.name.label("other_user_name"),
        )
        .join(mine, and_(mine.conversation_id == Conversation.id, mine.user_id == user_id))
        .outerjoin(other, and_(other.conversation_id == Conversation.id, other.user_id != user_id))
        .outerjoin(User, User.id == other.user_id)
        # conversations with a banned user are hidden
        .where(or_(User.id.is_(None), User.is_banned.is_(False)))
        .order_by(
            Conversation.last_message_at.desc().nulls_last(),
            Conversation.created_at.desc(),
            Conversation.id.desc(),
        )
        .limit(limit)
        .offset(offset)
    )
    return [dict(row) for row in db.execute(stmt).mappings()]


def unread_total(db: Session, user_id: int) -> int:
    mine = aliased(ConversationParticipant, name="mine")
    stmt = (
        select(func.count(Message.id))
        .join(mine, and_(mine.conversation_id == Message.conversation_id, mine.user_id == user_id))
        .join(User, User.id == Message.sender_id)
        .where(
            Message.sender_id != user_id,
            Message.is_read.is_(False),
            User.is_banned.is_(False),
        )
    )
    return db.scalar(stmt) or 0
