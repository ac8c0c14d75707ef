from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from kanban_board.core.errors import NotFoundError, require_text
from kanban_board.db.database import atomic
from kanban_board.logs import log_function
from kanban_board.models.task import Task, Subtask
from kanban_board.schemas.ordering import ReorderItem
from kanban_board.services.ordering import bulk_reorder, next_sort_key


class SubtaskService:
    """CRUD operations service for Subtask model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        task_id: int,
        title: str
    ) -> Subtask:
        title = require_text(title, "Subtask title")

        async with atomic(db):
            if not await db.get(Task, task_id):
                raise NotFoundError("Task not found")

            subtask = Subtask(
                task_id=task_id,
                title=title,
                done=False,
                sort_order=await next_sort_key(db, Subtask, Subtask.task_id == task_id)
            )
            db.add(subtask)

        await db.refresh(subtask)
        return subtask

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        subtask_id: int
    ) -> Optional[Subtask]:
        result = await db.execute(select(Subtask).where(Subtask.id == subtask_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_task_id(
        db: AsyncSession,
        task_id: int
    ) -> List[Subtask]:
        query = (
            select(Subtask)
            .where(Subtask.task_id == task_id)
            .order_by(Subtask.sort_order, Subtask.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        subtask_id: int,
        title: Optional[str] = None,
        done: Optional[bool] = None,
        sort_order: Optional[int] = None
    ) -> Subtask:
        async with atomic(db):
            subtask = await SubtaskService.get_by_id(db, subtask_id)
            if not subtask:
                raise NotFoundError("Subtask not found")

            if title is not None:
                subtask.title = require_text(title, "Subtask title")
            if done is not None:
                subtask.done = done
            if sort_order is not None:
                subtask.sort_order = sort_order

        return subtask

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        subtask_id: int
    ) -> None:
        async with atomic(db):
            result = await db.execute(delete(Subtask).where(Subtask.id == subtask_id))
            if result.rowcount == 0:
                raise NotFoundError("Subtask not found")

    @staticmethod
    @log_function()
    async def reorder(
        db: AsyncSession,
        task_id: int,
        items: Sequence[ReorderItem]
    ) -> int:
        """Bulk reorder of one task's checklist"""
        if not await db.get(Task, task_id):
            raise NotFoundError("Task not found")
        return await bulk_reorder(db, Subtask, items, Subtask.task_id == task_id)
