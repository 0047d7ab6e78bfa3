from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Assignment, AssignmentStatus


async def get_assignment(db: AsyncSession, assignment_id: UUID, for_update: bool = False):
    """
    Fetch one assignment, or None.
    With for_update the row stays locked until the transaction ends, which
    serializes writers recomputing the same assignment's counters.
    """
    stmt = select(Assignment).where(Assignment.id == assignment_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def create_assignment(db: AsyncSession, assignment: Assignment) -> Assignment:
    db.add(assignment)
    await db.flush()
    return assignment


async def update_assignment_counters(
    db: AsyncSession,
    assignment: Assignment,
    submitted_count: int,
    graded_count: int,
    status: AssignmentStatus,
) -> Assignment:
    assignment.submitted_count = submitted_count
    assignment.graded_count = graded_count
    assignment.status = status
    await db.flush()
    return assignment


async def list_assignments(db: AsyncSession, owner_id: UUID | None = None, published_only: bool = False):
    """
    Assignments newest first, optionally narrowed to one owner or to the
    published ones.
    """
    stmt = select(Assignment).order_by(Assignment.created_at.desc())
    if owner_id is not None:
        stmt = stmt.where(Assignment.owner_id == owner_id)
    if published_only:
        stmt = stmt.where(Assignment.published_at.is_not(None))
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalars().all()
