from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from .validators import empty_to_none


class DealSchema(BaseModel):
    id: int
    brand_id: int
    discount: float | None = None
    payment_terms: str | None = None
    shipping_terms: str | None = None
    freight_free_limit: float | None = None
    rrp_inc_vat: float | None = None
    rrp_exc_vat: float | None = None
    dealer_access: str | None = None
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    renewal_date: date | None = None
    first_purchase_date: date | None = None
    minimum_order_value: float | None = None
    commission_structure: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# Upsert : un seul deal par marque, tous les champs optionnels
class DealUpsertSchema(BaseModel):
    discount: float | None = Field(default=None, ge=0, le=1)
    payment_terms: str | None = None
    shipping_terms: str | None = None
    freight_free_limit: float | None = None
    rrp_inc_vat: float | None = None
    rrp_exc_vat: float | None = None
    dealer_access: str | None = None
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    renewal_date: date | None = None
    first_purchase_date: date | None = None
    minimum_order_value: float | None = None
    commission_structure: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return empty_to_none(v)
