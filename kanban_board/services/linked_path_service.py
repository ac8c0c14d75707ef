"""Path bindings: which project a working directory belongs to.

A binding maps a literal path string to a project (plus an optional default
column and the hostname it was registered from). Resolution is a
longest-prefix match over all bindings, so binding a repository root once
covers every directory below it.
"""
from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import String, case, delete, func, literal, select
from sqlalchemy.exc import IntegrityError

from kanban_board.core.errors import NotFoundError, TransactionError, ValidationError
from kanban_board.db.database import atomic
from kanban_board.logs import debug_logger, log_function
from kanban_board.models.project import Project
from kanban_board.models.column import BoardColumn
from kanban_board.models.linked_path import LinkedPath


def _require_path(path: Optional[str]) -> str:
    # Paths are stored verbatim; only blank values are rejected
    if path is None or not path.strip():
        raise ValidationError("Path must not be empty")
    return path


class LinkedPathService:
    """Registry and resolver of path bindings"""

    @staticmethod
    async def get_by_path(
        db: AsyncSession,
        path: str
    ) -> Optional[LinkedPath]:
        result = await db.execute(select(LinkedPath).where(LinkedPath.path == path))
        return result.scalars().first()

    @staticmethod
    async def get_by_project_id(
        db: AsyncSession,
        project_id: int
    ) -> List[LinkedPath]:
        query = (
            select(LinkedPath)
            .where(LinkedPath.project_id == project_id)
            .order_by(LinkedPath.path)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def _apply_binding(
        db: AsyncSession,
        project_id: int,
        path: str,
        hostname: Optional[str],
        default_column_id: Optional[int]
    ) -> LinkedPath:
        async with atomic(db):
            if not await db.get(Project, project_id):
                raise NotFoundError("Project not found")

            if default_column_id is not None:
                column = await db.get(BoardColumn, default_column_id)
                if not column:
                    raise NotFoundError("Column not found")
                if column.project_id != project_id:
                    raise ValidationError("Default column does not belong to the project")

            linked_path = await LinkedPathService.get_by_path(db, path)
            if linked_path:
                linked_path.project_id = project_id
                linked_path.hostname = hostname
                linked_path.default_column_id = default_column_id
            else:
                linked_path = LinkedPath(
                    project_id=project_id,
                    path=path,
                    hostname=hostname,
                    default_column_id=default_column_id
                )
                db.add(linked_path)

        return linked_path

    @staticmethod
    @log_function()
    async def bind(
        db: AsyncSession,
        project_id: int,
        path: str,
        hostname: Optional[str] = None,
        default_column_id: Optional[int] = None
    ) -> LinkedPath:
        """Bind a path to a project, replacing any existing binding of the same path"""
        path = _require_path(path)

        try:
            linked_path = await LinkedPathService._apply_binding(
                db, project_id, path, hostname, default_column_id
            )
        except TransactionError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            # Lost an insert race for the same path: the row exists now, update it
            debug_logger.warning(f"Concurrent bind of '{path}', retrying as update")
            linked_path = await LinkedPathService._apply_binding(
                db, project_id, path, hostname, default_column_id
            )

        await db.refresh(linked_path)
        debug_logger.info(f"Bound '{path}' to project {project_id}")
        return linked_path

    @staticmethod
    @log_function()
    async def unbind(
        db: AsyncSession,
        linked_path_id: int
    ) -> None:
        async with atomic(db):
            result = await db.execute(delete(LinkedPath).where(LinkedPath.id == linked_path_id))
            if result.rowcount == 0:
                raise NotFoundError("Linked path not found")

    @staticmethod
    @log_function()
    async def unbind_by_path(
        db: AsyncSession,
        path: str
    ) -> None:
        """Remove the binding registered for exactly this path string"""
        async with atomic(db):
            result = await db.execute(delete(LinkedPath).where(LinkedPath.path == path))
            if result.rowcount == 0:
                raise NotFoundError("Linked path not found")

    @staticmethod
    async def resolve(
        db: AsyncSession,
        path: str,
        hostname: Optional[str] = None
    ) -> Tuple[LinkedPath, str]:
        """Most specific binding for ``path`` and the bound project's name.

        A binding matches when its path is a character-wise prefix of the query
        (``/home/a`` matches ``/home/ab``). The longest matching path wins.
        Hostname never excludes a binding; it only ranks a same-host binding
        first should two matches ever have equal length.
        """
        bound_length = func.length(LinkedPath.path)
        query_prefix = func.substr(literal(path, String), 1, bound_length)

        ordering = [bound_length.desc()]
        if hostname:
            ordering.append(case((LinkedPath.hostname == hostname, 0), else_=1))
        ordering.append(LinkedPath.id)

        query = (
            select(LinkedPath, Project.name)
            .join(Project, Project.id == LinkedPath.project_id)
            .where(bound_length > 0, bound_length <= len(path), query_prefix == LinkedPath.path)
            .order_by(*ordering)
            .limit(1)
        )
        result = await db.execute(query)
        row = result.first()
        if row is None:
            raise NotFoundError("No linked path found")

        linked_path, project_name = row
        return linked_path, project_name
