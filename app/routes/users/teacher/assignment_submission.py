from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.auth.dependencies import is_teacher
from app.schemas.actor import Actor
from app.schemas.assignment_submission import (
    AssignmentSubmissionRead,
    AssignmentSubmissionGrade,
    AssignmentSubmissionBatchGrade,
)
from app.schemas.grade_stats import GradeStats
from app.services import grading
from app.services.submissions import list_submissions

router = APIRouter(
    prefix="/teacher/assignment-submission",
    tags=["Teacher Assignment Submission Endpoints"]
)

# ------------------------------------
# List all student submissions
# ------------------------------------
@router.get(
    "/list-submissions/{assignment_id}",
    response_model=list[AssignmentSubmissionRead]
)
async def list_assignment_submissions(
    assignment_id: UUID,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await list_submissions(db, current_user, assignment_id)


# ---------------------------
# Grade Assignment Submission (Teacher)
# ---------------------------
@router.patch(
    "/grade-submission/{submission_id}",
    response_model=GradeStats
)
async def grade_submission(
    submission_id: UUID,
    grade_in: AssignmentSubmissionGrade,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await grading.grade(db, current_user, submission_id, grade_in.score, grade_in.comment)


@router.patch(
    "/batch-grade/{assignment_id}",
    response_model=GradeStats
)
async def batch_grade_submissions(
    assignment_id: UUID,
    grade_in: AssignmentSubmissionBatchGrade,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await grading.batch_grade(
        db,
        current_user,
        assignment_id,
        grade_in.submission_ids,
        grade_in.score,
        grade_in.comment,
    )
