from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from kanban_board.core.errors import NotFoundError, ValidationError, require_text
from kanban_board.db.database import atomic
from kanban_board.logs import debug_logger, log_function
from kanban_board.models.project import Project
from kanban_board.models.column import BoardColumn
from kanban_board.models.task import Task, Subtask
from kanban_board.schemas.ordering import ReorderItem
from kanban_board.services.ordering import bulk_reorder, next_sort_key


async def _column_in_project(db: AsyncSession, column_id: int, project_id: int) -> BoardColumn:
    """Column a task of project_id may live in; anything else is refused"""
    column = await db.get(BoardColumn, column_id)
    if not column:
        raise NotFoundError("Column not found")
    if column.project_id != project_id:
        raise ValidationError("Column does not belong to the task's project")
    return column


class TaskService:
    """CRUD operations service for Task model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        project_id: int,
        title: str,
        column_id: Optional[int] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        source_tag: Optional[str] = None
    ) -> Task:
        """Create a task at the end of its project's order.

        Without a column the task lands in the project's first column.
        """
        title = require_text(title, "Task title")

        async with atomic(db):
            if not await db.get(Project, project_id):
                raise NotFoundError("Project not found")

            if column_id is None:
                first_column = await db.execute(
                    select(BoardColumn.id)
                    .where(BoardColumn.project_id == project_id)
                    .order_by(BoardColumn.sort_order, BoardColumn.id)
                    .limit(1)
                )
                column_id = first_column.scalar()
                if column_id is None:
                    raise ValidationError("Project has no columns")
            else:
                await _column_in_project(db, column_id, project_id)

            task = Task(
                project_id=project_id,
                column_id=column_id,
                title=title,
                description=description,
                priority=priority,
                source_tag=source_tag,
                sort_order=await next_sort_key(db, Task, Task.project_id == project_id)
            )
            db.add(task)

        await db.refresh(task)
        debug_logger.info(f"Created task {task.id} in project {project_id}, column {column_id}")
        return task

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        task_id: int
    ) -> Optional[Task]:
        """Get a task by ID"""
        result = await db.execute(select(Task).where(Task.id == task_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_project_id(
        db: AsyncSession,
        project_id: int
    ) -> List[Task]:
        """Get all tasks of a project ordered by sort key"""
        query = (
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(Task.sort_order, Task.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Task]:
        query = select(Task).order_by(Task.project_id, Task.sort_order, Task.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        source_tag: Optional[str] = None,
        column_id: Optional[int] = None,
        sort_order: Optional[int] = None
    ) -> Task:
        """Update a task's details; a new column must belong to the same project"""
        update_data = {}
        if title is not None:
            update_data["title"] = require_text(title, "Task title")
        if description is not None:
            update_data["description"] = description
        if priority is not None:
            update_data["priority"] = priority
        if source_tag is not None:
            update_data["source_tag"] = source_tag
        if sort_order is not None:
            update_data["sort_order"] = sort_order

        async with atomic(db):
            task = await TaskService.get_by_id(db, task_id)
            if not task:
                raise NotFoundError("Task not found")

            if column_id is not None and column_id != task.column_id:
                await _column_in_project(db, column_id, task.project_id)
                update_data["column_id"] = column_id
                debug_logger.debug(f"Moving task {task_id}: column {task.column_id} -> {column_id}")

            for field, value in update_data.items():
                setattr(task, field, value)

        return task

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        task_id: int
    ) -> None:
        """Delete a task and its subtasks"""
        async with atomic(db):
            if not await TaskService.get_by_id(db, task_id):
                raise NotFoundError("Task not found")
            await db.execute(delete(Subtask).where(Subtask.task_id == task_id))
            await db.execute(delete(Task).where(Task.id == task_id))

    @staticmethod
    @log_function()
    async def reorder(
        db: AsyncSession,
        project_id: int,
        items: Sequence[ReorderItem]
    ) -> int:
        """Bulk reorder of one project's tasks"""
        if not await db.get(Project, project_id):
            raise NotFoundError("Project not found")
        return await bulk_reorder(db, Task, items, Task.project_id == project_id)
