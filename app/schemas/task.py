from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.models.task import TaskStatus


def _clean_title(v: str) -> str:
    if not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip()


class TaskCreate(BaseModel):
    project_id: int
    title: str
    description: Optional[str] = None
    assignee_id: Optional[int] = None
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v) if v is not None else v


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[date] = None
    project_id: int
    assignee_id: Optional[int] = None


class TaskPage(BaseModel):
    items: List[TaskOut]
    page: int
    limit: int
    total: int
    pages: int
