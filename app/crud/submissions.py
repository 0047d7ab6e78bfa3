from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import AssignmentSubmission, SubmissionStatus


async def get_submission(db: AsyncSession, submission_id: UUID):
    result = await db.execute(
        select(AssignmentSubmission)
        .where(AssignmentSubmission.id == submission_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_submission_by_assignment_and_student(
    db: AsyncSession, assignment_id: UUID, student_id: UUID
):
    result = await db.execute(
        select(AssignmentSubmission)
        .where(
            AssignmentSubmission.assignment_id == assignment_id,
            AssignmentSubmission.student_id == student_id,
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_submissions_by_assignment(db: AsyncSession, assignment_id: UUID):
    result = await db.execute(
        select(AssignmentSubmission)
        .where(AssignmentSubmission.assignment_id == assignment_id)
        .order_by(AssignmentSubmission.submitted_at.desc())
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def list_submissions_by_student(db: AsyncSession, student_id: UUID):
    result = await db.execute(
        select(AssignmentSubmission)
        .where(AssignmentSubmission.student_id == student_id)
        .order_by(AssignmentSubmission.submitted_at.desc())
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def count_submissions(db: AsyncSession, assignment_id: UUID):
    """
    Fresh (submitted, graded) counts for one assignment.
    """
    result = await db.execute(
        select(
            func.count(AssignmentSubmission.id),
            func.count(AssignmentSubmission.id).filter(
                AssignmentSubmission.status == SubmissionStatus.GRADED
            ),
        ).where(AssignmentSubmission.assignment_id == assignment_id)
    )
    submitted_count, graded_count = result.one()
    return submitted_count or 0, graded_count or 0


async def upsert_submission(db: AsyncSession, submission: AssignmentSubmission) -> AssignmentSubmission:
    """
    Persist a submission record. A new record is inserted; one already
    tracked by the session is updated in place. The unique
    (assignment_id, student_id) constraint backs the one-row-per-pair rule.
    """
    if submission not in db:
        db.add(submission)
    await db.flush()
    return submission
