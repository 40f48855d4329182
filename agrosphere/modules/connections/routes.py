from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agrosphere.core.auth import get_current_user_id
from agrosphere.core.db import get_db
from agrosphere.modules.notifications.dispatcher import Notifier, get_notifier
from agrosphere.schemas.connections import (
    ConnectionOut,
    ConnectionRequestIn,
    ConnectionRespondIn,
    FriendInfo,
    RequestsOut,
)
from agrosphere.schemas.enums import RequestDirection
from .service import (
    list_connections_for_user,
    list_requests_for_user,
    respond,
    send_request,
)

router = APIRouter(prefix="/user-connections", tags=["connections"])


@router.post("", response_model=ConnectionOut, status_code=201)
def connect_request(
    payload: ConnectionRequestIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    notifier: Notifier = Depends(get_notifier),
):
    return send_request(db, user_id, payload.receiver_id, notifier=notifier)


@router.get("", response_model=List[FriendInfo])
def connections_list(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return list_connections_for_user(db, user_id)


@router.get("/requests", response_model=RequestsOut)
def requests_list(
    direction: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    if direction is not None:
        rows = list_requests_for_user(db, user_id, direction)
        return RequestsOut(**{direction: rows})

    return RequestsOut(
        sent=list_requests_for_user(db, user_id, RequestDirection.sent.value),
        received=list_requests_for_user(db, user_id, RequestDirection.received.value),
    )


@router.patch("/{connection_id}", response_model=ConnectionOut)
def connect_respond(
    connection_id: int,
    payload: ConnectionRespondIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    notifier: Notifier = Depends(get_notifier),
):
    return respond(db, connection_id, user_id, payload.status, notifier=notifier)
