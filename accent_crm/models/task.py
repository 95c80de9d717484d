from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from accent_crm.database import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)
    assigned_to = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="pending")
    priority = Column(String(16), nullable=False, default="medium")
    created_by = Column(String(255), nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
