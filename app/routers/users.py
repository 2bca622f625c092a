from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.project import ProjectOut
from app.schemas.task import TaskOut
from app.schemas.user import UserOut
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def me(current: User = Depends(get_current_user)):
    return current


# must be registered before /{user_id}
@router.get("/search", response_model=UserOut)
def search(email: str = Query(..., description="Exact email address"), db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return user_service.search_by_email(db, email)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return user_service.get_user(db, user_id, current)


@router.get("/{user_id}/projects", response_model=List[ProjectOut])
def get_user_projects(user_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return user_service.list_user_projects(db, user_id, current)


@router.get("/{user_id}/tasks", response_model=List[TaskOut])
def get_user_tasks(user_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return user_service.list_user_tasks(db, user_id, current)
