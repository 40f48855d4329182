from typing import Optional
from pydantic import BaseModel

from agrosphere.schemas.enums import ConnectionStatus, RequestDirection


class DiscoveredUser(BaseModel):
    id: int
    name: str
    area: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    connection_id: Optional[int] = None
    connection_status: Optional[ConnectionStatus] = None
    request_direction: Optional[RequestDirection] = None
