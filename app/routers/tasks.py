from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.task import TaskCreate, TaskUpdate, TaskOut
from app.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return task_service.create_task(db, current, task)


@router.put("/{task_id}/update", response_model=TaskOut)
def update_task(task_id: int, changes: TaskUpdate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return task_service.update_task(db, task_id, current, changes.model_dump(exclude_unset=True))


@router.delete("/{task_id}/delete")
def delete_task(task_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    task_service.delete_task(db, task_id, current)
    return {"detail": "Task deleted successfully"}
