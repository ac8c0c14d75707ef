from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class TaskBase(BaseModel):
    """Base schema for task data"""
    title: str
    description: Optional[str] = None
    priority: Optional[str] = None
    source_tag: Optional[str] = None


class TaskCreate(TaskBase):
    """Schema for task creation; without column_id the project's first column is used"""
    column_id: Optional[int] = None


class TaskUpdate(BaseModel):
    """Schema for task update; a new column_id moves the task within its project"""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    source_tag: Optional[str] = None
    column_id: Optional[int] = None
    sort_order: Optional[int] = None


class TaskResponse(TaskBase):
    """Schema for task response"""
    id: int
    project_id: int
    column_id: int
    sort_order: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubtaskCreate(BaseModel):
    title: str


class SubtaskUpdate(BaseModel):
    title: Optional[str] = None
    done: Optional[bool] = None
    sort_order: Optional[int] = None


class SubtaskResponse(BaseModel):
    id: int
    task_id: int
    title: str
    done: bool
    sort_order: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
