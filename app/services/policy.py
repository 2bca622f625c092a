"""Authorization rules for projects, tasks and users.

All checks reduce to membership lookups. Owner and admin are treated the same;
plain members may read a project and create tasks assigned to themselves.
Cross-user visibility is limited to projects the viewer administers and the
target belongs to.
"""
import logging
from typing import Optional, Set

from sqlalchemy.orm import Session

from app.errors import Forbidden, InvalidRequest
from app.models.project_member import ProjectMember, Role
from app.models.user import User
from app.services import membership as members

logger = logging.getLogger(__name__)


def require_member(db: Session, project_id: int, user: User, action: str) -> ProjectMember:
    membership = members.get_membership(db, project_id, user.id)
    if membership is None:
        logger.warning("user %s denied %s on project %s: not a member", user.id, action, project_id)
        raise Forbidden(f"Not authorized to {action}")
    return membership


def require_admin(db: Session, project_id: int, user: User, action: str) -> ProjectMember:
    membership = members.get_membership(db, project_id, user.id)
    if membership is None or not membership.is_admin:
        logger.warning("user %s denied %s on project %s: owner/admin required", user.id, action, project_id)
        raise Forbidden(f"Not authorized to {action}")
    return membership


def resolve_assignee(db: Session, membership: ProjectMember, assignee_id: Optional[int]) -> int:
    """Pick the assignee for a new task created by ``membership``'s user.

    Members may only assign to themselves. Owners and admins may assign to any
    project member. No assignee means the creator.
    """
    caller_id = membership.user_id
    if assignee_id is None or assignee_id == caller_id:
        return caller_id
    if membership.role == Role.MEMBER:
        raise Forbidden("Members can only assign tasks to themselves")
    require_assignable(db, membership.project_id, assignee_id)
    return assignee_id


def require_assignable(db: Session, project_id: int, assignee_id: int) -> None:
    if members.get_membership(db, project_id, assignee_id) is None:
        raise InvalidRequest("Assignee must be a member of the project")


def shared_admin_project_ids(db: Session, viewer: User, target_id: int) -> Set[int]:
    # two independent lookups intersected here, not a store-specific join
    return members.project_ids_for(db, target_id) & members.admin_project_ids(db, viewer.id)


def can_view_user(db: Session, viewer: User, target_id: int) -> bool:
    if viewer.id == target_id:
        return True
    return bool(shared_admin_project_ids(db, viewer, target_id))


def visible_project_ids(db: Session, viewer: User, target_id: int) -> Set[int]:
    if viewer.id == target_id:
        return members.project_ids_for(db, target_id)
    return shared_admin_project_ids(db, viewer, target_id)
