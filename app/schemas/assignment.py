from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models import AssignmentStatus


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    max_score: int = Field(default=100, gt=0)
    deadline: datetime | None = None


class AssignmentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    max_score: int | None = Field(default=None, gt=0)
    deadline: datetime | None = None


class AssignmentRead(BaseModel):
    id: UUID
    owner_id: UUID
    title: str
    description: Optional[str]
    max_score: int
    deadline: Optional[datetime]
    status: AssignmentStatus
    published_at: Optional[datetime]
    closed_at: Optional[datetime]
    submitted_count: int
    graded_count: int

    model_config = {
        "from_attributes": True
    }
