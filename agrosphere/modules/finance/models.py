from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Date,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
)

from agrosphere.core.db import Base, utcnow


class FinanceRecord(Base):
    __tablename__ = "finance_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    type = Column(
        String,
        CheckConstraint("type IN ('expense','earning')", name="finance_records_type_check"),
        nullable=False,
    )
    category = Column(String, nullable=False)
    amount = Column(Float, CheckConstraint("amount > 0", name="finance_records_amount_check"), nullable=False)
    description = Column(String, nullable=False, default="")

    date = Column(Date, nullable=False)
    # derived from date for aggregation
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_finance_records_user_period", "user_id", "year", "month"),
    )
