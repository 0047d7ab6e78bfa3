from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.auth.dependencies import is_student
from app.schemas.actor import Actor
from app.schemas.assignment_submission import (
    AssignmentSubmissionCreate,
    AssignmentSubmissionRead,
    AssignmentSubmissionUpdate,
)
from app.services import submissions as submission_service

router = APIRouter(
    prefix="/student/assignment-submission",
    tags=["Student Assignment Submission Endpoints"]
)

# ---------------------------
# Submit Assignment
# ---------------------------
@router.post("/submit-assignment/{assignment_id}", response_model=AssignmentSubmissionRead)
async def submit_assignment(
    assignment_id: UUID,
    submission_in: AssignmentSubmissionCreate,
    current_user: Actor = Depends(is_student),
    db: AsyncSession = Depends(get_db),
):
    return await submission_service.create_submission(
        db,
        current_user,
        assignment_id,
        content=submission_in.content,
        attachments=submission_in.attachments,
        student_id=submission_in.student_id,
    )


@router.patch("/update-submission/{submission_id}", response_model=AssignmentSubmissionRead)
async def update_submission(
    submission_id: UUID,
    submission_in: AssignmentSubmissionUpdate,
    current_user: Actor = Depends(is_student),
    db: AsyncSession = Depends(get_db),
):
    return await submission_service.update_submission(
        db,
        current_user,
        submission_id,
        content=submission_in.content,
        attachments=submission_in.attachments,
    )


@router.get("/submission/{submission_id}", response_model=AssignmentSubmissionRead)
async def get_submission(
    submission_id: UUID,
    current_user: Actor = Depends(is_student),
    db: AsyncSession = Depends(get_db),
):
    return await submission_service.get_submission(db, current_user, submission_id)


# ---------------------------
# Get All Submissions of Current Student
# ---------------------------
@router.get("/my-assignment-submissions", response_model=list[AssignmentSubmissionRead])
async def get_my_submissions(
    current_user: Actor = Depends(is_student),
    db: AsyncSession = Depends(get_db),
):
    return await submission_service.list_my_submissions(db, current_user)
