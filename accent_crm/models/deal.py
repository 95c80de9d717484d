from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from accent_crm.database import Base


class Deal(Base):
    __tablename__ = "deals"

    id = Column(Integer, primary_key=True, index=True)
    # 1:1 avec la marque
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, unique=True)
    discount = Column(Float, nullable=True)  # fraction 0-1
    payment_terms = Column(String(255), nullable=True)
    shipping_terms = Column(String(255), nullable=True)
    freight_free_limit = Column(Float, nullable=True)
    rrp_inc_vat = Column(Float, nullable=True)
    rrp_exc_vat = Column(Float, nullable=True)
    dealer_access = Column(String(255), nullable=True)
    contract_start_date = Column(Date, nullable=True)
    contract_end_date = Column(Date, nullable=True)
    renewal_date = Column(Date, nullable=True)
    first_purchase_date = Column(Date, nullable=True)
    minimum_order_value = Column(Float, nullable=True)
    commission_structure = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
