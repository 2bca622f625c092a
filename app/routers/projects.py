from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.task import TaskStatus
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectOut, MemberAdd, MemberOut
from app.schemas.task import TaskOut, TaskPage
from app.services import projects as project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(project: ProjectCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return project_service.create_project(db, current, project.name, project.description)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return project_service.get_project(db, project_id, current)


@router.put("/{project_id}/update", response_model=ProjectOut)
def update_project(project_id: int, changes: ProjectUpdate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return project_service.update_project(db, project_id, current, changes.model_dump(exclude_unset=True))


@router.get("/{project_id}/members", response_model=List[MemberOut])
def list_members(project_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return project_service.list_members(db, project_id, current)


@router.post("/{project_id}/members", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def add_member(project_id: int, member: MemberAdd, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return project_service.add_member(db, project_id, current, member.user_id, member.role)


@router.delete("/{project_id}/members/{user_id}")
def remove_member(project_id: int, user_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    project_service.remove_member(db, project_id, current, user_id)
    return {"detail": "Member removed"}


@router.get("/{project_id}/tasks", response_model=Union[TaskPage, List[TaskOut]])
def list_tasks(
    project_id: int,
    q: Optional[str] = Query(None, description="Search by title"),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    """If page and limit are provided, return paginated result dict {items,page,limit,total,pages}.
    Otherwise return plain list.
    """
    return project_service.list_project_tasks(db, project_id, current, q=q, status=task_status, page=page, limit=limit)
