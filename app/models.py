import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Enum, ForeignKey, Text, JSON, Uuid, UniqueConstraint, CheckConstraint
from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------
# Role Enum
# ---------------------------
class UserRole(str, enum.Enum):
    ADMIN = "admin"
    STUDENT = "student"
    TEACHER = "teacher"


# ---------------------------
# Status Enums
# ---------------------------
class AssignmentStatus(str, enum.Enum):
    DRAFT = "draft"
    OPEN = "open"
    GRADING = "grading"
    CLOSED = "closed"


class SubmissionStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    LATE = "late"
    GRADED = "graded"


# ---------------------------
# Assignment Model
# ---------------------------
class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    max_score = Column(Integer, nullable=False, default=100)
    deadline = Column(DateTime(timezone=True), nullable=True)

    status = Column(
        Enum(AssignmentStatus, name="assignment_status_enum"),
        nullable=False,
        default=AssignmentStatus.DRAFT,
    )
    published_at = Column(DateTime(timezone=True), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # Cached counters, written only by the lifecycle recomputation
    submitted_count = Column(Integer, nullable=False, default=0)
    graded_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("max_score > 0", name="ck_assignment_max_score_positive"),
    )


# ---------------------------
# Submission Model
# ---------------------------
class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    assignment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("assignments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    content = Column(Text, nullable=False, default="")
    attachments = Column(JSON, nullable=False, default=list)
    submitted_at = Column(DateTime(timezone=True), default=utcnow)

    status = Column(
        Enum(SubmissionStatus, name="submission_status_enum"),
        nullable=False,
        default=SubmissionStatus.SUBMITTED,
    )

    # Grading fields: all set together, only when status is graded
    score = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)
    graded_by = Column(Uuid(as_uuid=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="unique_assignment_student_submission"),
    )
