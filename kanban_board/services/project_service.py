from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from kanban_board.core.errors import NotFoundError, require_text
from kanban_board.db.database import atomic
from kanban_board.logs import debug_logger, log_function
from kanban_board.models.project import Project
from kanban_board.models.column import BoardColumn
from kanban_board.models.task import Task, Subtask
from kanban_board.models.linked_path import LinkedPath
from kanban_board.schemas.ordering import ReorderItem
from kanban_board.schemas.project import ProjectDetail, ColumnWithTasks
from kanban_board.schemas.task import TaskResponse
from kanban_board.services.ordering import SORT_GAP, bulk_reorder, next_sort_key

# Every new project starts with these columns, keyed 1000..5000
DEFAULT_COLUMNS = ("Backlog", "To Do", "In Progress", "Testing", "Done")


class ProjectService:
    """CRUD operations service for Project model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        name: str
    ) -> Project:
        """Create a project and its default columns in one transaction"""
        name = require_text(name, "Project name")

        async with atomic(db):
            project = Project(
                name=name,
                sort_order=await next_sort_key(db, Project)
            )
            db.add(project)
            await db.flush()

            for position, column_name in enumerate(DEFAULT_COLUMNS, start=1):
                db.add(BoardColumn(
                    project_id=project.id,
                    name=column_name,
                    sort_order=position * SORT_GAP
                ))

        await db.refresh(project)
        debug_logger.info(f"Created project {project.id} '{project.name}' with default columns")
        return project

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        project_id: int
    ) -> Optional[Project]:
        """Get project by id"""
        result = await db.execute(select(Project).where(Project.id == project_id))
        return result.scalars().first()

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Project]:
        """Get all projects in board order"""
        query = select(Project).order_by(Project.sort_order, Project.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_expanded(
        db: AsyncSession,
        project_id: int
    ) -> Optional[ProjectDetail]:
        """Project with its columns and, nested under each column, its tasks.

        The three tables are read independently and assembled here. Tasks are
        selected by project_id, so a task only appears under a column of its
        own project.
        """
        project = await ProjectService.get_by_id(db, project_id)
        if not project:
            return None

        columns_result = await db.execute(
            select(BoardColumn)
            .where(BoardColumn.project_id == project_id)
            .order_by(BoardColumn.sort_order, BoardColumn.id)
        )
        tasks_result = await db.execute(
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(Task.sort_order, Task.id)
        )

        tasks_by_column = {}
        for task in tasks_result.scalars().all():
            tasks_by_column.setdefault(task.column_id, []).append(TaskResponse.model_validate(task))

        columns = [
            ColumnWithTasks(
                id=column.id,
                project_id=column.project_id,
                name=column.name,
                sort_order=column.sort_order,
                created_at=column.created_at,
                tasks=tasks_by_column.get(column.id, []),
            )
            for column in columns_result.scalars().all()
        ]

        return ProjectDetail(
            id=project.id,
            name=project.name,
            sort_order=project.sort_order,
            created_at=project.created_at,
            columns=columns,
        )

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        project_id: int,
        name: str
    ) -> Project:
        """Rename a project"""
        name = require_text(name, "Project name")

        async with atomic(db):
            project = await ProjectService.get_by_id(db, project_id)
            if not project:
                raise NotFoundError("Project not found")
            project.name = name

        return project

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        project_id: int
    ) -> None:
        """Delete a project together with its columns, tasks, subtasks and linked paths"""
        async with atomic(db):
            if not await ProjectService.get_by_id(db, project_id):
                raise NotFoundError("Project not found")

            task_ids = select(Task.id).where(Task.project_id == project_id)
            await db.execute(delete(Subtask).where(Subtask.task_id.in_(task_ids)))
            await db.execute(delete(Task).where(Task.project_id == project_id))
            await db.execute(delete(LinkedPath).where(LinkedPath.project_id == project_id))
            await db.execute(delete(BoardColumn).where(BoardColumn.project_id == project_id))
            await db.execute(delete(Project).where(Project.id == project_id))

        debug_logger.info(f"Deleted project {project_id} with all dependents")

    @staticmethod
    @log_function()
    async def reorder(
        db: AsyncSession,
        items: Sequence[ReorderItem]
    ) -> int:
        """Bulk reorder of the project list"""
        return await bulk_reorder(db, Project, items)
