"""SQLAlchemy model definitions for agents."""
from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from dashboard_api.db.session import Base

DEFAULT_EMOJI = "🤖"


class Agent(Base):
    __tablename__ = "agents"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    emoji = Column(String, nullable=False, default=DEFAULT_EMOJI)
    status = Column(String, nullable=False, default="idle")
    system_prompt = Column(Text, nullable=True)
    # JSON-encoded arrays; decoded by the schemas layer.
    skills = Column(Text, nullable=False, default="[]")
    authorities = Column(Text, nullable=False, default="[]")
    model_primary = Column(String, nullable=False)
    model_fallback = Column(String, nullable=True)
    total_tasks = Column(Integer, nullable=False, default=0)
    total_calls = Column(Integer, nullable=False, default=0)
    total_tokens = Column(Integer, nullable=False, default=0)
    error_count = Column(Integer, nullable=False, default=0)
    storage_size = Column(Integer, nullable=False, default=0)
    last_active = Column(DateTime(timezone=True), nullable=True)
    disabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks = relationship("Task", back_populates="agent", passive_deletes=True)
    model_usages = relationship("ModelUsage", back_populates="agent", passive_deletes=True)
    memory_logs = relationship("MemoryLog", back_populates="agent", passive_deletes=True)
