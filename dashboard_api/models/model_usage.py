"""One model invocation by an agent. Rows are never updated."""
from datetime import datetime
import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from dashboard_api.db.session import Base


class ModelUsage(Base):
    __tablename__ = "model_usages"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    agent_id = Column(String, ForeignKey("agents.id", ondelete="CASCADE"), nullable=False, index=True)
    model_name = Column(String, nullable=False)
    tokens_used = Column(Integer, nullable=False, default=0)
    latency = Column(Float, nullable=False, default=0)
    fallback_used = Column(Boolean, nullable=False, default=False)
    success = Column(Boolean, nullable=False, default=True)
    error_message = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    agent = relationship("Agent", back_populates="model_usages")
