from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agrosphere.core.auth import get_current_user_id
from agrosphere.core.db import get_db
from agrosphere.schemas.notifications import NotificationOut
from .service import list_notifications, mark_notification_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def notifications_list(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return list_notifications(db, user_id, unread_only=unread_only, limit=limit)


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def notifications_mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return mark_notification_read(db, user_id, notification_id)
