import pytest
from unittest.mock import patch
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from kanban_board.core.errors import NotFoundError, TransactionError, ValidationError
from kanban_board.db.database import atomic
from kanban_board.models.column import BoardColumn
from kanban_board.models.linked_path import LinkedPath
from kanban_board.models.project import Project
from kanban_board.models.task import Task, Subtask
from kanban_board.services.column_service import ColumnService
from kanban_board.services.linked_path_service import LinkedPathService
from kanban_board.services.project_service import DEFAULT_COLUMNS, ProjectService
from kanban_board.services.subtask_service import SubtaskService
from kanban_board.services.task_service import TaskService


async def count(db, model):
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestProjectService:

    @pytest.mark.asyncio
    async def test_create_adds_default_columns(self, db):
        project = await ProjectService.create(db=db, name="Website")

        columns = await ColumnService.get_by_project_id(db=db, project_id=project.id)
        assert [c.name for c in columns] == list(DEFAULT_COLUMNS)
        assert [c.name for c in columns] == ["Backlog", "To Do", "In Progress", "Testing", "Done"]
        assert [c.sort_order for c in columns] == [1000, 2000, 3000, 4000, 5000]

    @pytest.mark.asyncio
    async def test_create_strips_name(self, db):
        project = await ProjectService.create(db=db, name="  Website  ")
        assert project.name == "Website"

    @pytest.mark.asyncio
    async def test_create_rejects_blank_name(self, db):
        with pytest.raises(ValidationError):
            await ProjectService.create(db=db, name="   ")
        assert await count(db, BoardColumn) == 0

    @pytest.mark.asyncio
    async def test_get_all_in_board_order(self, db):
        await ProjectService.create(db=db, name="A")
        await ProjectService.create(db=db, name="B")

        projects = await ProjectService.get_all(db=db)
        assert [p.name for p in projects] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_expanded_groups_tasks_by_column(self, db):
        project = await ProjectService.create(db=db, name="Website")
        other = await ProjectService.create(db=db, name="Other")
        columns = await ColumnService.get_by_project_id(db=db, project_id=project.id)

        await TaskService.create(db=db, project_id=project.id, title="Backlog item")
        await TaskService.create(db=db, project_id=project.id, title="Active", column_id=columns[2].id)
        await TaskService.create(db=db, project_id=other.id, title="Elsewhere")

        detail = await ProjectService.get_expanded(db=db, project_id=project.id)

        assert detail.name == "Website"
        assert len(detail.columns) == 5
        assert [t.title for t in detail.columns[0].tasks] == ["Backlog item"]
        assert [t.title for t in detail.columns[2].tasks] == ["Active"]
        assert sum(len(c.tasks) for c in detail.columns) == 2

    @pytest.mark.asyncio
    async def test_expanded_missing_project(self, db):
        assert await ProjectService.get_expanded(db=db, project_id=42) is None

    @pytest.mark.asyncio
    async def test_update_missing_project(self, db):
        with pytest.raises(NotFoundError):
            await ProjectService.update(db=db, project_id=42, name="Nope")

    @pytest.mark.asyncio
    async def test_delete_cascades_to_dependents(self, db):
        project = await ProjectService.create(db=db, name="Doomed")
        keeper = await ProjectService.create(db=db, name="Keeper")

        task = await TaskService.create(db=db, project_id=project.id, title="Task")
        await SubtaskService.create(db=db, task_id=task.id, title="Step")
        await LinkedPathService.bind(db=db, project_id=project.id, path="/srv/doomed")
        await TaskService.create(db=db, project_id=keeper.id, title="Survivor")
        project_id = project.id

        await ProjectService.delete(db=db, project_id=project_id)

        assert await ProjectService.get_by_id(db=db, project_id=project_id) is None
        assert await count(db, Subtask) == 0
        assert await count(db, LinkedPath) == 0
        assert await count(db, Task) == 1
        assert await count(db, BoardColumn) == 5

    @pytest.mark.asyncio
    async def test_delete_missing_project(self, db):
        with pytest.raises(NotFoundError):
            await ProjectService.delete(db=db, project_id=42)

    @pytest.mark.asyncio
    async def test_failed_column_insert_leaves_no_project(self, db):
        broken_columns = ("Backlog", "To Do", None)

        with patch("kanban_board.services.project_service.DEFAULT_COLUMNS", broken_columns):
            with pytest.raises(TransactionError):
                await ProjectService.create(db=db, name="Half built")

        assert await count(db, Project) == 0
        assert await count(db, BoardColumn) == 0


class TestAtomic:

    @pytest.mark.asyncio
    async def test_store_error_becomes_transaction_error(self, db):
        with pytest.raises(TransactionError) as exc_info:
            async with atomic(db):
                db.add(Project(name="Pending", sort_order=1000))
                await db.flush()
                raise OperationalError("INSERT INTO projects", {}, Exception("disk I/O error"))

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert exc_info.value.status_code == 503
        assert await count(db, Project) == 0

    @pytest.mark.asyncio
    async def test_board_error_passes_through(self, db):
        with pytest.raises(NotFoundError):
            async with atomic(db):
                db.add(Project(name="Pending", sort_order=1000))
                await db.flush()
                raise NotFoundError("Column not found")

        assert await count(db, Project) == 0
