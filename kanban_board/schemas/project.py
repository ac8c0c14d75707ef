from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from kanban_board.schemas.column import ColumnResponse
from kanban_board.schemas.task import TaskResponse


class ProjectCreate(BaseModel):
    """Schema for project creation"""
    name: str


class ProjectUpdate(BaseModel):
    """Schema for project rename"""
    name: str


class ProjectResponse(BaseModel):
    """Schema for project response"""
    id: int
    name: str
    sort_order: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ColumnWithTasks(ColumnResponse):
    """Column together with its tasks, ordered by sort key"""
    tasks: List[TaskResponse] = []


class ProjectDetail(ProjectResponse):
    """Expanded project: columns by sort key, tasks nested per column"""
    columns: List[ColumnWithTasks] = []
