from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.auth.dependencies import is_teacher
from app.schemas.actor import Actor
from app.schemas.assignment import AssignmentCreate, AssignmentRead, AssignmentUpdate
from app.schemas.grade_stats import GradeStats
from app.services import assignments as assignment_service

router = APIRouter(
    prefix="/teacher/assignment",
    tags=["Teacher Assignment Endpoints"]
)


@router.post("/create-assignment", response_model=AssignmentRead, status_code=201)
async def create_assignment(
    assignment_in: AssignmentCreate,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.create_assignment(db, current_user, assignment_in)


@router.put("/update-assignment/{assignment_id}", response_model=AssignmentRead)
async def update_assignment(
    assignment_id: UUID,
    assignment_in: AssignmentUpdate,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.update_assignment(db, current_user, assignment_id, assignment_in)


@router.post("/publish-assignment/{assignment_id}", response_model=AssignmentRead)
async def publish_assignment(
    assignment_id: UUID,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.publish_assignment(db, current_user, assignment_id)


@router.post("/close-assignment/{assignment_id}", response_model=AssignmentRead)
async def close_assignment(
    assignment_id: UUID,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.close_assignment(db, current_user, assignment_id)


@router.get("/my-assignments", response_model=list[AssignmentRead])
async def list_my_assignments(
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.list_assignments(db, current_user)


@router.get("/assignment/{assignment_id}", response_model=AssignmentRead)
async def get_assignment(
    assignment_id: UUID,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.get_assignment(db, current_user, assignment_id)


# ---------------------------
# Dashboard statistics
# ---------------------------
@router.get("/assignment-stats/{assignment_id}", response_model=GradeStats)
async def get_assignment_stats(
    assignment_id: UUID,
    current_user: Actor = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    return await assignment_service.get_assignment_stats(db, current_user, assignment_id)
