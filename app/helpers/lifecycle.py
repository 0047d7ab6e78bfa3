import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.assignments import update_assignment_counters
from app.crud.submissions import count_submissions
from app.exceptions import ValidationError
from app.models import Assignment, AssignmentSubmission, AssignmentStatus, SubmissionStatus, utcnow

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a timestamp to aware UTC. Naive values are taken as UTC,
    which is what backends without timezone support hand back.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------
# Submission transitions
# ---------------------------
def classify_submission(submitted_at: datetime, deadline: Optional[datetime]) -> SubmissionStatus:
    """
    Status a new or replaced submission starts in.
    Late only when strictly after the deadline; it is a label and changes nothing else.
    """
    if deadline is not None and as_utc(submitted_at) > as_utc(deadline):
        return SubmissionStatus.LATE
    return SubmissionStatus.SUBMITTED


def validate_score(score: int, assignment: Assignment) -> None:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("Score must be an integer")
    if score < 0 or score > assignment.max_score:
        raise ValidationError(
            f"Score must be between 0 and {assignment.max_score}"
        )


def apply_grade(
    submission: AssignmentSubmission,
    score: int,
    comment: Optional[str],
    grader_id: UUID,
    graded_at: Optional[datetime] = None,
) -> AssignmentSubmission:
    """
    Move a submission to graded. Grading an already graded submission
    overwrites all four grading fields, so re-grading is idempotent.
    """
    submission.score = score
    submission.comment = comment
    submission.graded_at = graded_at or utcnow()
    submission.graded_by = grader_id
    submission.status = SubmissionStatus.GRADED
    return submission


def apply_content(
    submission: AssignmentSubmission,
    content: str,
    attachments: list,
    submitted_at: datetime,
    deadline: Optional[datetime],
) -> AssignmentSubmission:
    """
    Write the authorship fields of a (re)submission and relabel it.
    Graded submissions are never reopened here.
    """
    if submission.status == SubmissionStatus.GRADED:
        raise ValidationError("Submission has already been graded")
    if not (content or "").strip() and not attachments:
        raise ValidationError("Submission needs content or at least one attachment")

    submission.content = content or ""
    submission.attachments = list(attachments)
    submission.submitted_at = submitted_at
    submission.status = classify_submission(submitted_at, deadline)
    return submission


# ---------------------------
# Assignment status
# ---------------------------
def derive_assignment_status(
    published: bool,
    closed: bool,
    submitted_count: int,
    graded_count: int,
) -> AssignmentStatus:
    if not published:
        return AssignmentStatus.DRAFT
    if closed:
        return AssignmentStatus.CLOSED
    if submitted_count == 0 or graded_count == 0:
        return AssignmentStatus.OPEN
    if graded_count < submitted_count:
        return AssignmentStatus.GRADING
    return AssignmentStatus.CLOSED


async def refresh_assignment_status(db: AsyncSession, assignment: Assignment) -> Assignment:
    """
    Recount the assignment's submissions and store the derived counters
    and status. Must run in the same transaction as the submission write,
    with the assignment row locked by the caller.
    """
    await db.flush()
    submitted_count, graded_count = await count_submissions(db, assignment.id)
    status = derive_assignment_status(
        published=assignment.published_at is not None,
        closed=assignment.closed_at is not None,
        submitted_count=submitted_count,
        graded_count=graded_count,
    )
    if status != assignment.status:
        logger.info(
            "Assignment %s status %s -> %s", assignment.id, assignment.status.value, status.value
        )
    return await update_assignment_counters(db, assignment, submitted_count, graded_count, status)


async def publish_assignment(db: AsyncSession, assignment: Assignment) -> Assignment:
    if assignment.published_at is not None:
        raise ValidationError("Assignment is already published")
    assignment.published_at = utcnow()
    return await refresh_assignment_status(db, assignment)


async def close_assignment(db: AsyncSession, assignment: Assignment) -> Assignment:
    if assignment.published_at is None:
        raise ValidationError("Draft assignments cannot be closed")
    if assignment.closed_at is not None:
        raise ValidationError("Assignment is already closed")
    assignment.closed_at = utcnow()
    return await refresh_assignment_status(db, assignment)
