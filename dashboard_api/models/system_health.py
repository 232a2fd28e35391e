"""Point-in-time health samples reported by the external health checker."""
from datetime import datetime
import uuid

from sqlalchemy import Column, DateTime, String, Text

from dashboard_api.db.session import Base


class SystemHealth(Base):
    __tablename__ = "system_health"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    metric = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="healthy")
    details = Column(Text, nullable=True)
    last_checked = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
