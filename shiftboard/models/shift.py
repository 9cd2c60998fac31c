from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import relationship

from ..constants import SHIFT_STATUSES
from . import Base

shift_status_enum = Enum(*SHIFT_STATUSES, name="shift_status")


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        Index("ix_shifts_time", "start_time", "end_time"),
        CheckConstraint("end_time > start_time", name="ck_shifts_end_after_start"),
    )

    id = Column(Integer, primary_key=True)
    org_id = Column(Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    position = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(shift_status_enum, nullable=False, default="scheduled")
    created_at = Column(DateTime, server_default=func.now())

    location = relationship("Location")
    user = relationship("User")
    swap_requests = relationship("ShiftSwapRequest", back_populates="shift", cascade="all, delete-orphan")

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600.0
