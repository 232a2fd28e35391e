"""Agent memory and decision journal entries."""
from datetime import datetime
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from dashboard_api.db.session import Base


class MemoryLog(Base):
    __tablename__ = "memory_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    agent_id = Column(String, ForeignKey("agents.id", ondelete="CASCADE"), nullable=False, index=True)
    entry_type = Column(String, nullable=False, default="info")
    summary = Column(Text, nullable=False)
    details = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    agent = relationship("Agent", back_populates="memory_logs")
