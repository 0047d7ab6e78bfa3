import logging
from typing import Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.policy import Action, PolicyResource, enforce
from app.crud.submissions import list_submissions_by_assignment, upsert_submission
from app.database import unit_of_work
from app.exceptions import ValidationError
from app.helpers.grade_statistics import summarize
from app.helpers.lifecycle import apply_grade, refresh_assignment_status, validate_score
from app.models import utcnow
from app.schemas.actor import Actor
from app.schemas.grade_stats import GradeStats
from app.services.loaders import load_assignment, load_submission

logger = logging.getLogger(__name__)


# ---------------------------
# Grade one submission
# ---------------------------
async def grade(
    db: AsyncSession,
    actor: Actor,
    submission_id: UUID,
    score: int,
    comment: Optional[str] = None,
) -> GradeStats:
    """
    Grade (or re-grade) a submission and return the assignment's updated stats.

    Runs as one transaction: the assignment row is locked, the policy is
    checked, the score validated, the submission moved to graded, the
    assignment counters recounted and the stats computed from a fresh read.
    Any failure leaves the submission and assignment untouched.
    """
    async with unit_of_work(db):
        submission = await load_submission(db, submission_id)
        assignment = await load_assignment(db, submission.assignment_id, for_update=True)

        enforce(actor, Action.GRADE_SUBMISSION, PolicyResource(assignment=assignment, submission=submission))
        validate_score(score, assignment)

        apply_grade(submission, score, comment, grader_id=actor.id)
        await upsert_submission(db, submission)
        await refresh_assignment_status(db, assignment)

        submissions = await list_submissions_by_assignment(db, assignment.id)
        stats = summarize(submissions, assignment.max_score)

    logger.info("Submission %s graded %s/%s by %s", submission_id, score, assignment.max_score, actor.id)
    return stats


# ---------------------------
# Grade many submissions at once
# ---------------------------
async def batch_grade(
    db: AsyncSession,
    actor: Actor,
    assignment_id: UUID,
    submission_ids: Sequence[UUID],
    score: int,
    comment: Optional[str] = None,
) -> GradeStats:
    """
    Give the same score and comment to several submissions of one assignment.
    All or nothing: one denied, missing or foreign submission aborts the batch.
    """
    async with unit_of_work(db):
        assignment = await load_assignment(db, assignment_id, for_update=True)
        enforce(actor, Action.GRADE_SUBMISSION, PolicyResource(assignment=assignment))
        validate_score(score, assignment)

        graded_at = utcnow()
        for submission_id in dict.fromkeys(submission_ids):
            submission = await load_submission(db, submission_id)
            if submission.assignment_id != assignment.id:
                raise ValidationError(f"Submission {submission_id} does not belong to this assignment")
            enforce(actor, Action.GRADE_SUBMISSION, PolicyResource(assignment=assignment, submission=submission))
            apply_grade(submission, score, comment, grader_id=actor.id, graded_at=graded_at)

        await db.flush()
        await refresh_assignment_status(db, assignment)

        submissions = await list_submissions_by_assignment(db, assignment.id)
        stats = summarize(submissions, assignment.max_score)

    logger.info("Batch graded %d submissions of assignment %s", len(set(submission_ids)), assignment_id)
    return stats
