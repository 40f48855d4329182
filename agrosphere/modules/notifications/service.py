from sqlalchemy import select, update
from sqlalchemy.orm import Session

from agrosphere.core.errors import NotFoundError
from agrosphere.modules.notifications.models import Notification


def list_notifications(db: Session, user_id: int, unread_only: bool = False, limit: int = 50):
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))

    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return db.scalars(stmt).all()


def mark_notification_read(db: Session, user_id: int, notification_id: int) -> Notification:
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=True)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Notification not found")

    db.commit()
    return db.get(Notification, notification_id)
