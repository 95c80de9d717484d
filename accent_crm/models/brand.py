from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, JSON, String, Text
from accent_crm.database import Base


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    type = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)
    country = Column(String(120), nullable=True)
    country_of_origin = Column(String(120), nullable=True)
    # Listes de tags (secteurs projet / catégories design)
    project_sectors = Column(JSON, nullable=True)
    design_categories = Column(JSON, nullable=True)
    status = Column(String(32), nullable=False, default="prospect")
    deal_stage = Column(String(32), nullable=False, default="lead")
    priority = Column(Integer, nullable=True)
    annual_contract_value = Column(Float, nullable=True)
    sales_owner = Column(String(255), nullable=True)
    date_added = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_contact_date = Column(DateTime, nullable=True)
    next_followup_date = Column(Date, nullable=True)
    excluded_categories = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    hide = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
