from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from accent_crm.database import Base


class Communication(Base):
    __tablename__ = "communications"

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=True)
    type = Column(String(16), nullable=False, default="email")
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    subject = Column(String(500), nullable=True)
    summary = Column(Text, nullable=True)
    participants = Column(String(500), nullable=True)
    follow_up_required = Column(Boolean, nullable=False, default=False)
    next_action = Column(String(500), nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
