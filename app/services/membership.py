"""Who belongs to which project, and with what role.

Every authorization decision is answered from these queries.
"""
import logging
from typing import List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import Conflict
from app.models.project_member import ProjectMember, Role, ADMIN_ROLES

logger = logging.getLogger(__name__)


def get_membership(db: Session, project_id: int, user_id: int) -> Optional[ProjectMember]:
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )


def list_members(db: Session, project_id: int) -> List[ProjectMember]:
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id)
        .order_by(ProjectMember.id)
        .all()
    )


def project_ids_for(db: Session, user_id: int) -> Set[int]:
    rows = db.query(ProjectMember.project_id).filter(ProjectMember.user_id == user_id).all()
    return {project_id for (project_id,) in rows}


def admin_project_ids(db: Session, user_id: int) -> Set[int]:
    """Projects in which the user is owner or admin."""
    rows = (
        db.query(ProjectMember.project_id)
        .filter(ProjectMember.user_id == user_id, ProjectMember.role.in_(list(ADMIN_ROLES)))
        .all()
    )
    return {project_id for (project_id,) in rows}


def add_membership(db: Session, project_id: int, user_id: int, role: Role, commit: bool = True) -> ProjectMember:
    if get_membership(db, project_id, user_id):
        raise Conflict("User already a member of this project")
    membership = ProjectMember(project_id=project_id, user_id=user_id, role=role)
    db.add(membership)
    if commit:
        try:
            db.commit()
        except IntegrityError:
            # lost a race with a concurrent add for the same pair
            db.rollback()
            raise Conflict("User already a member of this project")
        db.refresh(membership)
    return membership


def delete_membership(db: Session, membership: ProjectMember) -> None:
    db.delete(membership)
    db.commit()
