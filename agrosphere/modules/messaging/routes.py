from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from agrosphere.core.auth import get_current_user_id
from agrosphere.core.db import get_db
from agrosphere.schemas.messaging import (
    ConversationCreateIn,
    ConversationOut,
    ConversationSummaryOut,
    MarkReadOut,
    MessageCreateIn,
    MessageOut,
    UnreadCountOut,
)
from .service import (
    append_message,
    find_or_create_conversation,
    list_conversations_for_user,
    list_messages,
    mark_read,
    participant_ids,
    require_participant,
    unread_total,
)

router = APIRouter(prefix="/messages", tags=["messages"])


# ---------- CONVERSATIONS ----------

@router.post("/conversations", response_model=ConversationOut)
def conversation_open(
    payload: ConversationCreateIn,
    response: Response,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    convo, created = find_or_create_conversation(db, user_id, payload.participant_id)
    response.status_code = 201 if created else 200

    return ConversationOut(
        id=convo.id,
        created_at=convo.created_at,
        last_message_at=convo.last_message_at,
        participant_ids=participant_ids(db, convo.id),
    )


@router.get("/conversations", response_model=List[ConversationSummaryOut])
def conversation_list(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return list_conversations_for_user(db, user_id, limit=limit, offset=offset)


@router.get("/conversations/{conversation_id}", response_model=List[MessageOut])
def message_list(
    conversation_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    require_participant(db, conversation_id, user_id)
    return list_messages(db, conversation_id, limit=limit, offset=offset)


@router.patch("/conversations/{conversation_id}/read", response_model=MarkReadOut)
def message_mark_read(
    conversation_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    require_participant(db, conversation_id, user_id)
    return MarkReadOut(updated=mark_read(db, conversation_id, user_id))


# ---------- MESSAGES ----------

@router.post("", response_model=MessageOut, status_code=201)
def message_send(
    payload: MessageCreateIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return append_message(db, payload.conversation_id, user_id, payload.content)


@router.get("/unread-count", response_model=UnreadCountOut)
def message_unread_count(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return UnreadCountOut(unread_count=unread_total(db, user_id))
