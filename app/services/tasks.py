import logging

from sqlalchemy.orm import Session

from app.errors import NotFound
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.schemas.task import TaskCreate
from app.services import policy

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "assignee_id", "status", "due_date")


def _get_or_404(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFound("Task not found")
    return task


def create_task(db: Session, user: User, data: TaskCreate) -> Task:
    if not db.query(Project).filter(Project.id == data.project_id).first():
        raise NotFound("Project not found")
    membership = policy.require_member(db, data.project_id, user, "create tasks in this project")
    assignee_id = policy.resolve_assignee(db, membership, data.assignee_id)

    task = Task(
        project_id=data.project_id,
        title=data.title,
        description=data.description,
        assignee_id=assignee_id,
        status=data.status,
        due_date=data.due_date,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("user %s created task %s in project %s", user.id, task.id, task.project_id)
    return task


def update_task(db: Session, task_id: int, user: User, changes: dict) -> Task:
    """Apply the supplied fields. Only owners and admins of the task's project may do this."""
    task = _get_or_404(db, task_id)
    policy.require_admin(db, task.project_id, user, "update this task")

    assignee_id = changes.get("assignee_id")
    if assignee_id is not None and assignee_id != task.assignee_id:
        policy.require_assignable(db, task.project_id, assignee_id)

    for field in UPDATABLE_FIELDS:
        if field not in changes:
            continue
        # title and status are required columns; a null means "leave as is"
        if field in ("title", "status") and changes[field] is None:
            continue
        setattr(task, field, changes[field])
    db.commit()
    db.refresh(task)
    logger.info("user %s updated task %s", user.id, task_id)
    return task


def delete_task(db: Session, task_id: int, user: User) -> None:
    task = _get_or_404(db, task_id)
    policy.require_admin(db, task.project_id, user, "delete this task")
    db.delete(task)
    db.commit()
    logger.info("user %s deleted task %s", user.id, task_id)
