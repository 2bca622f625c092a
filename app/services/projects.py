import logging
from math import ceil
from typing import Optional

from sqlalchemy.orm import Session

from app.errors import Forbidden, InvalidRequest, NotFound
from app.models.project import Project
from app.models.project_member import Role
from app.models.task import Task, TaskStatus
from app.models.user import User
from app.services import membership as members
from app.services import policy

logger = logging.getLogger(__name__)


def _get_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFound("Project not found")
    return project


def create_project(db: Session, creator: User, name: str, description: Optional[str] = None) -> Project:
    """Create a project with ``creator`` as its owner, in one commit."""
    project = Project(name=name, description=description, created_by=creator.id)
    db.add(project)
    db.flush()
    members.add_membership(db, project.id, creator.id, Role.OWNER, commit=False)
    db.commit()
    db.refresh(project)
    logger.info("user %s created project %s", creator.id, project.id)
    return project


def get_project(db: Session, project_id: int, user: User) -> Project:
    project = _get_or_404(db, project_id)
    policy.require_member(db, project_id, user, "view this project")
    return project


def update_project(db: Session, project_id: int, user: User, changes: dict) -> Project:
    project = _get_or_404(db, project_id)
    policy.require_admin(db, project_id, user, "update this project")
    if changes.get("name") is not None:
        project.name = changes["name"]
    if "description" in changes:
        project.description = changes["description"]
    db.commit()
    db.refresh(project)
    logger.info("user %s updated project %s", user.id, project_id)
    return project


def list_members(db: Session, project_id: int, user: User):
    _get_or_404(db, project_id)
    policy.require_member(db, project_id, user, "view members of this project")
    return members.list_members(db, project_id)


def add_member(db: Session, project_id: int, user: User, target_user_id: int, role: str = "member"):
    _get_or_404(db, project_id)
    policy.require_admin(db, project_id, user, "add members")
    if not db.query(User).filter(User.id == target_user_id).first():
        raise NotFound("User not found")
    membership = members.add_membership(db, project_id, target_user_id, Role(role))
    logger.info("user %s added user %s to project %s as %s", user.id, target_user_id, project_id, role)
    return membership


def remove_member(db: Session, project_id: int, user: User, target_user_id: int) -> None:
    project = _get_or_404(db, project_id)
    if target_user_id == user.id:
        raise InvalidRequest("You cannot remove yourself")
    policy.require_admin(db, project_id, user, "remove members")
    membership = members.get_membership(db, project_id, target_user_id)
    if membership is None:
        raise NotFound("User is not a member of this project")
    if target_user_id == project.created_by:
        raise Forbidden("The project owner cannot be removed")
    # tasks assigned to the removed member keep their assignee_id
    members.delete_membership(db, membership)
    logger.info("user %s removed user %s from project %s", user.id, target_user_id, project_id)


def list_project_tasks(
    db: Session,
    project_id: int,
    user: User,
    q: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
):
    """If page and limit are provided, return paginated result dict {items,page,limit,total,pages}.
    Otherwise return plain list.
    """
    _get_or_404(db, project_id)
    policy.require_member(db, project_id, user, "view tasks of this project")
    query = db.query(Task).filter(Task.project_id == project_id)
    if q:
        query = query.filter(Task.title.ilike(f"%{q}%"))
    if status:
        query = query.filter(Task.status == status)
    query = query.order_by(Task.id)
    if page is None or limit is None:
        return query.all()

    total = query.count()
    # normalize page/limit
    if page < 1:
        page = 1
    if limit < 1:
        limit = 10
    pages = ceil(total / limit) if total > 0 else 1
    items = query.limit(limit).offset((page - 1) * limit).all()
    return {"items": items, "page": page, "limit": limit, "total": total, "pages": pages}
