import logging
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.policy import Action, PolicyResource, enforce
from app.crud.assignments import create_assignment as insert_assignment
from app.crud.assignments import list_assignments as select_assignments
from app.crud.submissions import list_submissions_by_assignment
from app.database import unit_of_work
from app.helpers import lifecycle
from app.helpers.grade_statistics import summarize
from app.exceptions import ValidationError
from app.models import Assignment, AssignmentStatus, UserRole
from app.schemas.actor import Actor
from app.schemas.assignment import AssignmentCreate, AssignmentUpdate
from app.schemas.grade_stats import GradeStats
from app.services.loaders import load_assignment

logger = logging.getLogger(__name__)


async def create_assignment(
    db: AsyncSession,
    actor: Actor,
    assignment_in: AssignmentCreate,
    owner_id: UUID | None = None,
) -> Assignment:
    """
    Create an assignment in draft. Teachers create for themselves; an admin
    may create on behalf of another owner.
    """
    assignment = Assignment(
        owner_id=owner_id or actor.id,
        title=assignment_in.title,
        description=assignment_in.description,
        max_score=assignment_in.max_score,
        deadline=assignment_in.deadline,
        status=AssignmentStatus.DRAFT,
        submitted_count=0,
        graded_count=0,
    )
    enforce(actor, Action.MANAGE_ASSIGNMENT, PolicyResource(assignment=assignment))

    async with unit_of_work(db):
        await insert_assignment(db, assignment)

    logger.info("Assignment %s created by %s", assignment.id, actor.id)
    return assignment


async def update_assignment(
    db: AsyncSession,
    actor: Actor,
    assignment_id: UUID,
    assignment_in: AssignmentUpdate,
) -> Assignment:
    """
    Edit an assignment's details. The maximum score is fixed once the
    assignment is published, and an assignment the owner closed is read-only.
    """
    async with unit_of_work(db):
        assignment = await load_assignment(db, assignment_id, for_update=True)
        enforce(actor, Action.MANAGE_ASSIGNMENT, PolicyResource(assignment=assignment))

        if assignment.closed_at is not None:
            raise ValidationError("Closed assignments cannot be edited")
        if (
            assignment_in.max_score is not None
            and assignment_in.max_score != assignment.max_score
            and assignment.published_at is not None
        ):
            raise ValidationError("Maximum score cannot change after publishing")

        # Update only the provided fields
        if assignment_in.title is not None:
            assignment.title = assignment_in.title
        if assignment_in.description is not None:
            assignment.description = assignment_in.description
        if assignment_in.max_score is not None:
            assignment.max_score = assignment_in.max_score
        if assignment_in.deadline is not None:
            assignment.deadline = assignment_in.deadline
        await db.flush()

    logger.info("Assignment %s updated by %s", assignment_id, actor.id)
    return assignment


async def publish_assignment(db: AsyncSession, actor: Actor, assignment_id: UUID) -> Assignment:
    async with unit_of_work(db):
        assignment = await load_assignment(db, assignment_id, for_update=True)
        enforce(actor, Action.MANAGE_ASSIGNMENT, PolicyResource(assignment=assignment))
        await lifecycle.publish_assignment(db, assignment)
    return assignment


async def close_assignment(db: AsyncSession, actor: Actor, assignment_id: UUID) -> Assignment:
    async with unit_of_work(db):
        assignment = await load_assignment(db, assignment_id, for_update=True)
        enforce(actor, Action.MANAGE_ASSIGNMENT, PolicyResource(assignment=assignment))
        await lifecycle.close_assignment(db, assignment)
    return assignment


async def get_assignment_stats(db: AsyncSession, actor: Actor, assignment_id: UUID) -> GradeStats:
    assignment = await load_assignment(db, assignment_id)
    enforce(actor, Action.READ_ASSIGNMENT_STATS, PolicyResource(assignment=assignment))
    submissions = await list_submissions_by_assignment(db, assignment.id)
    return summarize(submissions, assignment.max_score)


# ---------------------------
# Reads
# ---------------------------
async def get_assignment(db: AsyncSession, actor: Actor, assignment_id: UUID) -> Assignment:
    assignment = await load_assignment(db, assignment_id)
    enforce(actor, Action.READ_ASSIGNMENT, PolicyResource(assignment=assignment))
    return assignment


async def list_assignments(db: AsyncSession, actor: Actor):
    """
    Teachers see their own assignments, students the published ones and
    admins all of them.
    """
    if actor.role == UserRole.TEACHER:
        return await select_assignments(db, owner_id=actor.id)
    if actor.role == UserRole.STUDENT:
        return await select_assignments(db, published_only=True)
    return await select_assignments(db)
