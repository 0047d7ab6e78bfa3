import enum
import logging
from typing import NamedTuple, Optional
from uuid import UUID

from app.exceptions import PolicyDenied
from app.models import Assignment, AssignmentSubmission, AssignmentStatus, SubmissionStatus, UserRole
from app.schemas.actor import Actor

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    READ_SUBMISSION = "read_submission"
    CREATE_SUBMISSION = "create_submission"
    UPDATE_SUBMISSION = "update_submission"
    GRADE_SUBMISSION = "grade_submission"
    READ_ASSIGNMENT_STATS = "read_assignment_stats"
    MANAGE_ASSIGNMENT = "manage_assignment"
    READ_ASSIGNMENT = "read_assignment"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


# An explicit owner close (closed_at set) refuses submissions in any status
ACCEPTING_STATUSES = (AssignmentStatus.OPEN, AssignmentStatus.GRADING, AssignmentStatus.CLOSED)

TEACHER_OWNER_ACTIONS = (
    Action.GRADE_SUBMISSION,
    Action.READ_ASSIGNMENT_STATS,
    Action.READ_SUBMISSION,
    Action.MANAGE_ASSIGNMENT,
    Action.READ_ASSIGNMENT,
)


class PolicyResource(NamedTuple):
    """
    Snapshot the decision is made on.

    For CREATE_SUBMISSION, `submission` is the existing row for the
    (assignment, student) pair if there is one, and `student_id` is the
    student the new submission is for.
    """
    assignment: Optional[Assignment] = None
    submission: Optional[AssignmentSubmission] = None
    student_id: Optional[UUID] = None


def _owns_assignment(actor: Actor, resource: PolicyResource) -> bool:
    return resource.assignment is not None and resource.assignment.owner_id == actor.id


def _owns_submission(actor: Actor, resource: PolicyResource) -> bool:
    return resource.submission is not None and resource.submission.student_id == actor.id


def _can_create_submission(actor: Actor, resource: PolicyResource) -> bool:
    if resource.assignment is None or resource.student_id != actor.id:
        return False
    assignment = resource.assignment
    if assignment.status not in ACCEPTING_STATUSES or assignment.closed_at is not None:
        return False
    existing = resource.submission
    # Overwriting a graded submission is not allowed
    return existing is None or existing.status != SubmissionStatus.GRADED


# ---------------------------
# Evaluate
# ---------------------------
def evaluate(actor: Actor, action: Action, resource: PolicyResource) -> Decision:
    """
    Decide whether `actor` may perform `action` on `resource`.

    Pure: reads only its arguments. Rules are checked in order and the
    first one that matches decides:
      1. admins may do everything
      2. students read/update only their own submission, and read
         published assignments
      3. students create a submission for themselves on a published
         assignment the owner has not closed, unless their existing
         submission is already graded
      4. teachers grade, read stats, read submissions, read and manage
         (edit, publish, close) only the assignments they own
      5. everything else is denied
    """
    if actor.role == UserRole.ADMIN:
        return Decision.ALLOW

    if actor.role == UserRole.STUDENT:
        if action in (Action.READ_SUBMISSION, Action.UPDATE_SUBMISSION):
            return Decision.ALLOW if _owns_submission(actor, resource) else Decision.DENY
        if action == Action.CREATE_SUBMISSION:
            return Decision.ALLOW if _can_create_submission(actor, resource) else Decision.DENY
        if action == Action.READ_ASSIGNMENT:
            published = resource.assignment is not None and resource.assignment.published_at is not None
            return Decision.ALLOW if published else Decision.DENY

    if actor.role == UserRole.TEACHER:
        if action in TEACHER_OWNER_ACTIONS:
            return Decision.ALLOW if _owns_assignment(actor, resource) else Decision.DENY

    return Decision.DENY


def enforce(actor: Actor, action: Action, resource: PolicyResource) -> None:
    """
    Raise PolicyDenied unless `evaluate` allows the request.
    """
    if evaluate(actor, action, resource) == Decision.DENY:
        logger.warning(
            "Policy denied %s for %s %s", action.value, actor.role.value, actor.id
        )
        raise PolicyDenied(f"Not allowed to {action.value.replace('_', ' ')}")
