from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agrosphere.core.auth import get_current_user_id, require_admin
from agrosphere.core.db import get_db
from agrosphere.schemas.users import ProfileUpdateRequest, UserAdminOut, UserOut
from .service import get_public_profile, get_user, set_banned, upsert_profile

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(
    prefix="/admin/users",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


# ----------------------------
# ME
# ----------------------------
@router.get("/me", response_model=UserOut)
def read_me(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return get_user(db, user_id)


@router.put("/me", response_model=UserOut)
def update_me(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return upsert_profile(
        db,
        user_id,
        name=payload.name,
        area=payload.area,
        city=payload.city,
        country=payload.country,
    )


# ----------------------------
# PUBLIC PROFILE
# ----------------------------
# registered after the discovery routes so /users/nearby is matched first
@router.get("/{other_id}", response_model=UserOut)
def read_user(
    other_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return get_public_profile(db, other_id)


# ----------------------------
# MODERATION
# ----------------------------
@admin_router.post("/{target_id}/ban", response_model=UserAdminOut)
def ban_user(target_id: int, db: Session = Depends(get_db)):
    return set_banned(db, target_id, True)


@admin_router.post("/{target_id}/unban", response_model=UserAdminOut)
def unban_user(target_id: int, db: Session = Depends(get_db)):
    return set_banned(db, target_id, False)
