from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.models import SubmissionStatus


#for students
class AssignmentSubmissionCreate(BaseModel):
    content: str = ""
    attachments: list[str] = Field(default_factory=list)
    # admins submitting on a student's behalf
    student_id: UUID | None = None


class AssignmentSubmissionUpdate(BaseModel):
    content: str | None = None
    attachments: list[str] | None = None


class AssignmentSubmissionRead(BaseModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    content: str
    attachments: list[str]
    submitted_at: datetime
    status: SubmissionStatus
    score: Optional[int] = None
    comment: Optional[str] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[UUID] = None

    model_config = {
        "from_attributes": True
    }


#for teachers
class AssignmentSubmissionGrade(BaseModel):
    score: int
    comment: Optional[str] = None


class AssignmentSubmissionBatchGrade(BaseModel):
    submission_ids: list[UUID] = Field(min_length=1)
    score: int
    comment: Optional[str] = None
