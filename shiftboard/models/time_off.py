from sqlalchemy import CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Integer, Text, func

from ..constants import REQUEST_STATUSES, TIME_OFF_TYPES
from . import Base

time_off_type_enum = Enum(*TIME_OFF_TYPES, name="time_off_type")
request_status_enum = Enum(*REQUEST_STATUSES, name="request_status")


class TimeOffRequest(Base):
    __tablename__ = "time_off_requests"
    __table_args__ = (CheckConstraint("end_date >= start_date", name="ck_time_off_end_not_before_start"),)

    id = Column(Integer, primary_key=True)
    org_id = Column(Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    type = Column(time_off_type_enum, nullable=False)
    status = Column(request_status_enum, nullable=False, default="pending", index=True)
    reason = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
