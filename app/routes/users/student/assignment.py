from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.auth.dependencies import is_student
from app.schemas.actor import Actor
from app.schemas.assignment import AssignmentRead
from app.services import assignments as assignment_service

router = APIRouter(
    prefix="/student/assignment",
    tags=["Student Assignment Endpoints"]
)


@router.get("/assignments", response_model=list[AssignmentRead])
async def list_published_assignments(
    current_user: Actor = Depends(is_student),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.list_assignments(db, current_user)


@router.get("/assignment/{assignment_id}", response_model=AssignmentRead)
async def get_assignment(
    assignment_id: UUID,
    current_user: Actor = Depends(is_student),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.get_assignment(db, current_user, assignment_id)
