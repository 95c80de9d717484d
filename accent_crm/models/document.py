from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from accent_crm.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    document_type = Column(String(32), nullable=False, default="other")
    name = Column(String(255), nullable=False)
    url = Column(String(1000), nullable=False)
    file_size = Column(Integer, nullable=True)
    version = Column(String(64), nullable=True)
    upload_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    uploaded_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
