from datetime import datetime

from pydantic import BaseModel, field_validator

from .choices import CommunicationType
from .validators import empty_to_none, reject_null


class CommunicationSchema(BaseModel):
    id: int
    brand_id: int
    contact_id: int | None = None
    type: str
    date: datetime
    subject: str | None = None
    summary: str | None = None
    participants: str | None = None
    follow_up_required: bool = False
    next_action: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# Ligne du journal des communications (avec le nom de la marque)
class CommunicationLogSchema(CommunicationSchema):
    brand_name: str | None = None


class CommunicationCreateSchema(BaseModel):
    brand_id: int
    contact_id: int | None = None
    type: CommunicationType = "email"
    date: datetime | None = None
    subject: str | None = None
    summary: str | None = None
    participants: str | None = None
    follow_up_required: bool = False
    next_action: str | None = None
    created_by: str | None = None

    @field_validator("contact_id", "date", "subject", "summary", "participants", "next_action", "created_by", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return empty_to_none(v)


class CommunicationUpdateSchema(BaseModel):
    contact_id: int | None = None
    type: CommunicationType | None = None
    date: datetime | None = None
    subject: str | None = None
    summary: str | None = None
    participants: str | None = None
    follow_up_required: bool | None = None
    next_action: str | None = None

    @field_validator("type", "date", "follow_up_required")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
