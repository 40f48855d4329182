from datetime import datetime
from agrosphere.schemas.base import BaseSchema


class NotificationOut(BaseSchema):
    id: int
    kind: str
    message: str
    is_read: bool
    created_at: datetime
