from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .choices import TaskPriority, TaskStatus
from .validators import empty_to_none, reject_null


class TaskSchema(BaseModel):
    id: int
    brand_id: int
    title: str
    description: str | None = None
    due_date: datetime | None = None
    assigned_to: str | None = None
    status: str
    priority: str
    created_by: str | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class TaskWithBrandSchema(TaskSchema):
    brand_name: str | None = None


class TaskCreateSchema(BaseModel):
    brand_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    due_date: datetime | None = None
    assigned_to: str | None = None
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    created_by: str | None = None

    @field_validator("description", "due_date", "assigned_to", "created_by", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return empty_to_none(v)


class TaskUpdateSchema(BaseModel):
    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    assigned_to: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None

    @field_validator("title", "status", "priority")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
