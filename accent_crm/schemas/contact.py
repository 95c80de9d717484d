from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .validators import empty_to_none, reject_null


class ContactSchema(BaseModel):
    id: int
    brand_id: int
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    is_primary: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ContactCreateSchema(BaseModel):
    brand_id: int
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str | None = None
    role: str | None = None
    is_primary: bool = False

    @field_validator("phone", "role", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return empty_to_none(v)


class ContactUpdateSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    is_primary: bool | None = None

    @field_validator("is_primary")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
