import logging
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.policy import Action, PolicyResource, enforce
from app.crud.submissions import (
    get_submission_by_assignment_and_student,
    list_submissions_by_assignment,
    list_submissions_by_student,
    upsert_submission,
)
from app.database import unit_of_work
from app.exceptions import ValidationError
from app.helpers.lifecycle import apply_content, refresh_assignment_status
from app.models import AssignmentSubmission, UserRole, utcnow
from app.schemas.actor import Actor
from app.services.loaders import load_assignment, load_submission

logger = logging.getLogger(__name__)


# ---------------------------
# Submit (or resubmit)
# ---------------------------
async def create_submission(
    db: AsyncSession,
    actor: Actor,
    assignment_id: UUID,
    content: str = "",
    attachments: Sequence[str] = (),
    student_id: Optional[UUID] = None,
    submitted_at: Optional[datetime] = None,
) -> AssignmentSubmission:
    """
    Store a student's work for an assignment.

    There is at most one submission per (assignment, student): submitting
    again before grading overwrites the existing row, after grading it is
    refused. Submissions after the deadline are accepted and labelled late.
    """
    if student_id is None:
        if actor.role != UserRole.STUDENT:
            raise ValidationError("student_id is required when submitting on a student's behalf")
        student_id = actor.id

    async with unit_of_work(db):
        assignment = await load_assignment(db, assignment_id, for_update=True)
        existing = await get_submission_by_assignment_and_student(db, assignment.id, student_id)

        enforce(
            actor,
            Action.CREATE_SUBMISSION,
            PolicyResource(assignment=assignment, submission=existing, student_id=student_id),
        )
        if assignment.published_at is None:
            raise ValidationError("Assignment is not published yet")

        submission = existing or AssignmentSubmission(
            assignment_id=assignment.id,
            student_id=student_id,
        )
        apply_content(
            submission,
            content,
            attachments,
            submitted_at=submitted_at or utcnow(),
            deadline=assignment.deadline,
        )
        await upsert_submission(db, submission)
        await refresh_assignment_status(db, assignment)

    logger.info(
        "%s submission %s for assignment %s (%s)",
        "Replaced" if existing else "Created",
        submission.id,
        assignment_id,
        submission.status.value,
    )
    return submission


# ---------------------------
# Edit own submission
# ---------------------------
async def update_submission(
    db: AsyncSession,
    actor: Actor,
    submission_id: UUID,
    content: Optional[str] = None,
    attachments: Optional[Sequence[str]] = None,
) -> AssignmentSubmission:
    async with unit_of_work(db):
        submission = await load_submission(db, submission_id)
        assignment = await load_assignment(db, submission.assignment_id, for_update=True)

        enforce(actor, Action.UPDATE_SUBMISSION, PolicyResource(assignment=assignment, submission=submission))

        apply_content(
            submission,
            content if content is not None else submission.content,
            attachments if attachments is not None else submission.attachments,
            submitted_at=utcnow(),
            deadline=assignment.deadline,
        )
        await upsert_submission(db, submission)
        await refresh_assignment_status(db, assignment)

    logger.info("Submission %s updated by %s", submission_id, actor.id)
    return submission


# ---------------------------
# Reads
# ---------------------------
async def get_submission(db: AsyncSession, actor: Actor, submission_id: UUID) -> AssignmentSubmission:
    submission = await load_submission(db, submission_id)
    assignment = await load_assignment(db, submission.assignment_id)
    enforce(actor, Action.READ_SUBMISSION, PolicyResource(assignment=assignment, submission=submission))
    return submission


async def list_submissions(db: AsyncSession, actor: Actor, assignment_id: UUID):
    """
    All submissions of an assignment, newest first. Owner or admin only.
    """
    assignment = await load_assignment(db, assignment_id)
    enforce(actor, Action.READ_ASSIGNMENT_STATS, PolicyResource(assignment=assignment))
    return await list_submissions_by_assignment(db, assignment.id)


async def list_my_submissions(db: AsyncSession, actor: Actor):
    """
    The actor's own submissions across all assignments, newest first.
    """
    return await list_submissions_by_student(db, actor.id)
