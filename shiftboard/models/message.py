from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func

from . import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True)
    org_id = Column(Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    subject = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    is_broadcast = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
