from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .choices import DocumentType
from .validators import reject_null


class DocumentSchema(BaseModel):
    id: int
    brand_id: int
    document_type: str
    name: str
    url: str
    file_size: int | None = None
    version: str | None = None
    upload_date: datetime | None = None
    uploaded_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class DocumentCreateSchema(BaseModel):
    brand_id: int
    document_type: DocumentType = "other"
    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    file_size: int | None = None
    version: str | None = None
    uploaded_by: str | None = None


class DocumentUpdateSchema(BaseModel):
    document_type: DocumentType | None = None
    name: str | None = None
    url: str | None = None
    file_size: int | None = None
    version: str | None = None

    @field_validator("document_type", "name", "url")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
