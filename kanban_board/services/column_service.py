from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete

from kanban_board.core.errors import NotFoundError, require_text
from kanban_board.db.database import atomic
from kanban_board.logs import debug_logger, log_function
from kanban_board.models.project import Project
from kanban_board.models.column import BoardColumn
from kanban_board.models.task import Task, Subtask
from kanban_board.models.linked_path import LinkedPath
from kanban_board.schemas.ordering import ReorderItem
from kanban_board.services.ordering import bulk_reorder, next_sort_key


class ColumnService:
    """CRUD operations service for BoardColumn model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        project_id: int,
        name: str
    ) -> BoardColumn:
        """Append a new column to a project's board"""
        name = require_text(name, "Column name")

        async with atomic(db):
            project = await db.get(Project, project_id)
            if not project:
                raise NotFoundError("Project not found")

            column = BoardColumn(
                project_id=project_id,
                name=name,
                sort_order=await next_sort_key(db, BoardColumn, BoardColumn.project_id == project_id)
            )
            db.add(column)

        await db.refresh(column)
        return column

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        column_id: int
    ) -> Optional[BoardColumn]:
        """Get column by id"""
        query = select(BoardColumn).where(BoardColumn.id == column_id)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_by_project_id(
        db: AsyncSession,
        project_id: int
    ) -> List[BoardColumn]:
        """Get all columns of a project in board order"""
        query = (
            select(BoardColumn)
            .where(BoardColumn.project_id == project_id)
            .order_by(BoardColumn.sort_order, BoardColumn.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        column_id: int,
        name: Optional[str] = None,
        sort_order: Optional[int] = None
    ) -> BoardColumn:
        """Rename a column or set its sort key; the owning project never changes"""
        update_data = {}
        if name is not None:
            update_data["name"] = require_text(name, "Column name")
        if sort_order is not None:
            update_data["sort_order"] = sort_order

        async with atomic(db):
            column = await ColumnService.get_by_id(db, column_id)
            if not column:
                raise NotFoundError("Column not found")
            for field, value in update_data.items():
                setattr(column, field, value)

        return column

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        column_id: int
    ) -> None:
        """Delete a column with its tasks and their subtasks.

        Linked paths that used the column as their default keep their binding
        and fall back to no default column.
        """
        async with atomic(db):
            if not await ColumnService.get_by_id(db, column_id):
                raise NotFoundError("Column not found")

            task_ids = select(Task.id).where(Task.column_id == column_id)
            await db.execute(delete(Subtask).where(Subtask.task_id.in_(task_ids)))
            await db.execute(delete(Task).where(Task.column_id == column_id))
            await db.execute(
                update(LinkedPath)
                .where(LinkedPath.default_column_id == column_id)
                .values(default_column_id=None)
            )
            await db.execute(delete(BoardColumn).where(BoardColumn.id == column_id))

        debug_logger.info(f"Deleted column {column_id} with its tasks")

    @staticmethod
    @log_function()
    async def reorder(
        db: AsyncSession,
        project_id: int,
        items: Sequence[ReorderItem]
    ) -> int:
        """Bulk reorder of one project's columns; ids of other projects fail the batch"""
        if not await db.get(Project, project_id):
            raise NotFoundError("Project not found")
        return await bulk_reorder(db, BoardColumn, items, BoardColumn.project_id == project_id)
