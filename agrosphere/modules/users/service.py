from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from agrosphere.core.errors import NotFoundError, ValidationError
from .models import User


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_public_profile(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user or user.is_banned:
        raise NotFoundError("User not found")
    return user


def upsert_profile(
    db: Session,
    user_id: int,
    name: str,
    area: Optional[str] = None,
    city: Optional[str] = None,
    country: Optional[str] = None,
) -> User:
    name = _clean(name)
    if not name:
        raise ValidationError("name is required")

    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id)
        db.add(user)
        logger.info(f"Profile created | user={user_id}")

    user.name = name
    user.area = _clean(area)
    user.city = _clean(city)
    user.country = _clean(country)

    db.commit()
    db.refresh(user)
    return user


def set_banned(db: Session, user_id: int, banned: bool) -> User:
    user = get_user(db, user_id)
    user.is_banned = banned
    db.commit()
    db.refresh(user)

    logger.info(f"User ban updated | user={user_id} banned={banned}")
    return user
