from sqlalchemy import Column, Integer, String, Boolean, DateTime

from agrosphere.core.db import Base, utcnow


class User(Base):
    __tablename__ = "users"

    # ids are issued by the identity provider
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)

    area = Column(String, nullable=True)
    city = Column(String, nullable=True)
    country = Column(String, nullable=True)

    is_banned = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def has_location(self) -> bool:
        return bool(self.area or self.city)
