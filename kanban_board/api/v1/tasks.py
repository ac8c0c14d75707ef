from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.project_service import ProjectService
from kanban_board.services.task_service import TaskService
from kanban_board.schemas.ordering import ReorderItem, MessageResponse
from kanban_board.schemas.task import TaskCreate, TaskResponse, TaskUpdate

project_tasks_router = APIRouter(
    prefix="/projects/{project_id}/tasks",
    tags=["tasks"],
)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


@project_tasks_router.put("/reorder", response_model=MessageResponse)
async def reorder_tasks(
    project_id: int,
    items: List[ReorderItem],
    db: AsyncSession = Depends(get_async_session),
):
    """Reorder tasks of a project"""
    await TaskService.reorder(db=db, project_id=project_id, items=items)
    return {"message": "Tasks reordered successfully"}


@project_tasks_router.get("", response_model=List[TaskResponse])
async def get_project_tasks(
    project_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    project = await ProjectService.get_by_id(db=db, project_id=project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return await TaskService.get_by_project_id(db=db, project_id=project_id)


@project_tasks_router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    project_id: int,
    task_create: TaskCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a task; without column_id it goes to the project's first column"""
    return await TaskService.create(
        db=db,
        project_id=project_id,
        title=task_create.title,
        column_id=task_create.column_id,
        description=task_create.description,
        priority=task_create.priority,
        source_tag=task_create.source_tag
    )


@router.get("", response_model=List[TaskResponse])
async def get_tasks(
    project_id: Optional[int] = Query(None, description="Only tasks of this project"),
    db: AsyncSession = Depends(get_async_session),
):
    """List tasks, optionally filtered by project"""
    if project_id is not None:
        return await TaskService.get_by_project_id(db=db, project_id=project_id)
    return await TaskService.get_all(db=db)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    task = await TaskService.get_by_id(db=db, task_id=task_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Update task details or move it to another column of the same project"""
    return await TaskService.update(
        db=db,
        task_id=task_id,
        **task_update.model_dump(exclude_unset=True)
    )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    await TaskService.delete(db=db, task_id=task_id)
