from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from kanban_board.core.errors import ConflictError, NotFoundError, TransactionError, require_text
from kanban_board.db.database import atomic
from kanban_board.logs import debug_logger, log_function
from kanban_board.models.tag import Tag


class TagService:
    """Service for the flat tag catalog"""

    @staticmethod
    async def _name_taken(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Tag.id).where(Tag.name == name)
        if exclude_id is not None:
            query = query.where(Tag.id != exclude_id)
        result = await db.execute(query)
        return result.first() is not None

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        name: str,
        color: str
    ) -> Tag:
        """Create a tag; a name already in the catalog is a conflict"""
        name = require_text(name, "Tag name")

        try:
            async with atomic(db):
                if await TagService._name_taken(db, name):
                    raise ConflictError(f"Tag '{name}' already exists")
                tag = Tag(name=name, color=color)
                db.add(tag)
        except TransactionError as e:
            # A concurrent insert of the same name only shows up at commit time
            if isinstance(e.__cause__, IntegrityError):
                raise ConflictError(f"Tag '{name}' already exists") from e
            raise

        await db.refresh(tag)
        debug_logger.info(f"Created tag {tag.id} '{tag.name}'")
        return tag

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        tag_id: int
    ) -> Optional[Tag]:
        """Get tag by ID"""
        result = await db.execute(select(Tag).where(Tag.id == tag_id))
        return result.scalars().first()

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Tag]:
        """All tags ordered by name"""
        result = await db.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        tag_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None
    ) -> Tag:
        """Rename or recolour a tag; renaming onto an existing name is a conflict"""
        if name is not None:
            name = require_text(name, "Tag name")

        try:
            async with atomic(db):
                tag = await TagService.get_by_id(db, tag_id)
                if not tag:
                    raise NotFoundError("Tag not found")
                if name is not None and await TagService._name_taken(db, name, exclude_id=tag_id):
                    raise ConflictError(f"Tag '{name}' already exists")

                if name is not None:
                    tag.name = name
                if color is not None:
                    tag.color = color
        except TransactionError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise ConflictError(f"Tag '{name}' already exists") from e
            raise

        return tag

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        tag_id: int
    ) -> None:
        """Delete a tag; a missing tag is reported, never silently ignored"""
        async with atomic(db):
            result = await db.execute(delete(Tag).where(Tag.id == tag_id))
            if result.rowcount == 0:
                raise NotFoundError("Tag not found")
