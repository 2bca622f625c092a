import logging

from sqlalchemy.orm import Session

from app.errors import Forbidden, NotFound
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.services import membership as members
from app.services import policy
from app.utils.auth import normalize_email

logger = logging.getLogger(__name__)


def _get_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def search_by_email(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user:
        raise NotFound("No user found with that email")
    return user


def get_user(db: Session, user_id: int, viewer: User) -> User:
    user = _get_or_404(db, user_id)
    if not policy.can_view_user(db, viewer, user_id):
        logger.warning("user %s denied view of user %s", viewer.id, user_id)
        raise Forbidden("Not authorized to view this user")
    return user


def list_user_projects(db: Session, user_id: int, viewer: User):
    _get_or_404(db, user_id)
    project_ids = policy.visible_project_ids(db, viewer, user_id)
    if not project_ids:
        return []
    return db.query(Project).filter(Project.id.in_(sorted(project_ids))).order_by(Project.id).all()


def list_user_tasks(db: Session, user_id: int, viewer: User):
    """Tasks assigned to the user; for other viewers only those in projects they administer."""
    _get_or_404(db, user_id)
    query = db.query(Task).filter(Task.assignee_id == user_id)
    if viewer.id != user_id:
        allowed = members.admin_project_ids(db, viewer.id)
        if not allowed:
            return []
        query = query.filter(Task.project_id.in_(sorted(allowed)))
    return query.order_by(Task.id).all()
