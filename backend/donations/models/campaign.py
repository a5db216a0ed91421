"""
Campaign Model — Fundraising campaigns that donations are raised against.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean

from donations.database import Base


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    title = Column(String(128), nullable=False)
    community_id = Column(String(64))

    goal = Column(Integer, nullable=False, default=0)
    raised = Column(Integer, nullable=False, default=0)   # Sum of completed donations
    donors_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
