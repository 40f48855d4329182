from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from agrosphere.schemas.base import BaseSchema
from agrosphere.schemas.enums import ConnectionStatus, RequestDirection


class ConnectionRequestIn(BaseModel):
    receiver_id: int


class ConnectionRespondIn(BaseModel):
    # validated by the service so the error shape stays uniform
    status: str


class ConnectionOut(BaseSchema):
    id: int
    requester_id: int
    receiver_id: int
    status: ConnectionStatus
    created_at: datetime
    updated_at: datetime


class FriendInfo(BaseModel):
    connection_id: int
    status: ConnectionStatus
    direction: RequestDirection
    user_id: int
    name: str
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    created_at: datetime


class RequestsOut(BaseModel):
    sent: List[FriendInfo] = []
    received: List[FriendInfo] = []
