from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from .choices import BrandStatus, DealStage
from .validators import clean_tags, empty_to_none, reject_null
from .contact import ContactSchema
from .deal import DealSchema
from .communication import CommunicationSchema
from .document import DocumentSchema
from .task import TaskSchema


# Schéma pour la lecture (DB → API → JSON)
class BrandSchema(BaseModel):
    id: int
    name: str
    type: str | None = None
    website: str | None = None
    country: str | None = None
    country_of_origin: str | None = None
    project_sectors: list[str] | None = None
    design_categories: list[str] | None = None
    status: str
    deal_stage: str
    priority: int | None = None
    annual_contract_value: float | None = None
    sales_owner: str | None = None
    date_added: datetime | None = None
    last_contact_date: datetime | None = None
    next_followup_date: date | None = None
    excluded_categories: str | None = None
    comments: str | None = None
    hide: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True  # indispensable avec SQLAlchemy


class BrandWithRelationsSchema(BrandSchema):
    contacts: list[ContactSchema] = []
    deal: DealSchema | None = None
    communications: list[CommunicationSchema] = []
    documents: list[DocumentSchema] = []
    tasks: list[TaskSchema] = []


# Schéma pour la création (API → DB)
class BrandCreateSchema(BaseModel):
    name: str = Field(min_length=1)
    type: str | None = None
    website: str | None = None
    country: str | None = None
    country_of_origin: str | None = None
    project_sectors: list[str] | None = None
    design_categories: list[str] | None = None
    status: BrandStatus = "prospect"
    deal_stage: DealStage = "lead"
    priority: int | None = Field(default=None, ge=1, le=3)
    annual_contract_value: float | None = None
    sales_owner: str | None = None
    next_followup_date: date | None = None
    excluded_categories: str | None = None
    comments: str | None = None
    hide: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator(
        "type", "website", "country", "country_of_origin", "sales_owner",
        "excluded_categories", "comments", "priority", "next_followup_date",
        mode="before",
    )
    @classmethod
    def blank_fields(cls, v):
        return empty_to_none(v)

    @field_validator("project_sectors", "design_categories", mode="before")
    @classmethod
    def tags(cls, v):
        return clean_tags(v)


# Schéma pour la mise à jour (API → DB)
class BrandUpdateSchema(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    type: str | None = None
    website: str | None = None
    country: str | None = None
    country_of_origin: str | None = None
    project_sectors: list[str] | None = None
    design_categories: list[str] | None = None
    status: BrandStatus | None = None
    deal_stage: DealStage | None = None
    priority: int | None = Field(default=None, ge=1, le=3)
    annual_contract_value: float | None = None
    sales_owner: str | None = None
    last_contact_date: datetime | None = None
    next_followup_date: date | None = None
    excluded_categories: str | None = None
    comments: str | None = None
    hide: bool | None = None

    @field_validator(
        "type", "website", "country", "country_of_origin", "sales_owner",
        "excluded_categories", "comments", "priority", "next_followup_date",
        mode="before",
    )
    @classmethod
    def blank_fields(cls, v):
        return empty_to_none(v)

    @field_validator("project_sectors", "design_categories", mode="before")
    @classmethod
    def tags(cls, v):
        return clean_tags(v)

    @field_validator("name", "status", "deal_stage", "hide")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
