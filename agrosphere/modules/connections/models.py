from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
)

from agrosphere.core.db import Base, utcnow


class Connection(Base):
    __tablename__ = "connections"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # unordered pair, smaller id first
    user_low = Column(Integer, nullable=False)
    user_high = Column(Integer, nullable=False)

    status = Column(
        String,
        CheckConstraint(
            "status IN ('pending','accepted','rejected')",
            name="connections_status_check",
        ),
        nullable=False,
        default="pending",
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_low", "user_high", name="uq_connections_pair"),
        CheckConstraint("requester_id <> receiver_id", name="connections_no_self_check"),
    )
