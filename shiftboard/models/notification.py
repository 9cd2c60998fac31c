from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text, func

from ..constants import NOTIFICATION_TYPES
from . import Base

notification_type_enum = Enum(*NOTIFICATION_TYPES, name="notification_type")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    org_id = Column(Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Set for announcements and direct messages; carries each recipient's read state.
    message_id = Column(Integer, ForeignKey("messages.id", ondelete="CASCADE"), nullable=True, index=True)
    type = Column(notification_type_enum, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
