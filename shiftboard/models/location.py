from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func

from . import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True)
    org_id = Column(Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    timezone = Column(String(64), nullable=False, default="America/New_York")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
