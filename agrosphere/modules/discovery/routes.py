from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agrosphere.core.auth import get_current_user_id
from agrosphere.core.db import get_db
from agrosphere.schemas.discovery import DiscoveredUser
from .service import match_by_location, search_users

router = APIRouter(prefix="/users", tags=["discovery"])


@router.get("/nearby", response_model=List[DiscoveredUser])
def users_nearby(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return match_by_location(db, user_id, limit=limit)


@router.get("/search", response_model=List[DiscoveredUser])
def users_search(
    q: Optional[str] = None,
    include_name: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return search_users(db, user_id, q, include_name=include_name, limit=limit)
