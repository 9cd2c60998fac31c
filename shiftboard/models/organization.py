from sqlalchemy import Column, DateTime, Integer, String, func

from . import Base


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    plan_tier = Column(String, nullable=False, default="starter", server_default="starter")
    created_at = Column(DateTime, server_default=func.now())
