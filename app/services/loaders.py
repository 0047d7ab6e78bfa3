from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.assignments import get_assignment
from app.crud.submissions import get_submission
from app.exceptions import NotFound
from app.models import Assignment, AssignmentSubmission


async def load_assignment(db: AsyncSession, assignment_id: UUID, for_update: bool = False) -> Assignment:
    assignment = await get_assignment(db, assignment_id, for_update=for_update)
    if not assignment:
        raise NotFound("Assignment not found")
    return assignment


async def load_submission(db: AsyncSession, submission_id: UUID) -> AssignmentSubmission:
    submission = await get_submission(db, submission_id)
    if not submission:
        raise NotFound("Submission not found")
    return submission
