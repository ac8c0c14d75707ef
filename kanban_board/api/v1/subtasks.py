from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.task_service import TaskService
from kanban_board.services.subtask_service import SubtaskService
from kanban_board.schemas.ordering import ReorderItem, MessageResponse
from kanban_board.schemas.task import SubtaskCreate, SubtaskResponse, SubtaskUpdate

task_subtasks_router = APIRouter(
    prefix="/tasks/{task_id}/subtasks",
    tags=["subtasks"],
)

router = APIRouter(
    prefix="/subtasks",
    tags=["subtasks"],
)


@task_subtasks_router.put("/reorder", response_model=MessageResponse)
async def reorder_subtasks(
    task_id: int,
    items: List[ReorderItem],
    db: AsyncSession = Depends(get_async_session),
):
    await SubtaskService.reorder(db=db, task_id=task_id, items=items)
    return {"message": "Subtasks reordered successfully"}


@task_subtasks_router.get("", response_model=List[SubtaskResponse])
async def get_subtasks(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Checklist of a task in order"""
    task = await TaskService.get_by_id(db=db, task_id=task_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return await SubtaskService.get_by_task_id(db=db, task_id=task_id)


@task_subtasks_router.post("", response_model=SubtaskResponse, status_code=status.HTTP_201_CREATED)
async def create_subtask(
    task_id: int,
    subtask_create: SubtaskCreate,
    db: AsyncSession = Depends(get_async_session),
):
    return await SubtaskService.create(db=db, task_id=task_id, title=subtask_create.title)


@router.put("/{subtask_id}", response_model=SubtaskResponse)
async def update_subtask(
    subtask_id: int,
    subtask_update: SubtaskUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Rename, tick off or reposition a subtask"""
    return await SubtaskService.update(
        db=db,
        subtask_id=subtask_id,
        title=subtask_update.title,
        done=subtask_update.done,
        sort_order=subtask_update.sort_order
    )


@router.delete("/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subtask(
    subtask_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    await SubtaskService.delete(db=db, subtask_id=subtask_id)
