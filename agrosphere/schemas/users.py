from typing import Optional
from pydantic import BaseModel, Field

from agrosphere.schemas.base import TimestampedSchema


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class UserOut(TimestampedSchema):
    id: int
    name: str
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class UserAdminOut(UserOut):
    is_banned: bool
