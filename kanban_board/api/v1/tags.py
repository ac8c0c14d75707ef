from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.schemas.tag import TagCreate, TagResponse, TagUpdate
from kanban_board.services.tag_service import TagService

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
)


@router.get("", response_model=List[TagResponse])
async def get_tags(
    db: AsyncSession = Depends(get_async_session),
):
    """All tags of the catalog"""
    return await TagService.get_all(db=db)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_create: TagCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a tag; the name must be unique"""
    return await TagService.create(
        db=db,
        name=tag_create.name,
        color=tag_create.color,
    )


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    tag_update: TagUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    return await TagService.update(
        db=db,
        tag_id=tag_id,
        name=tag_update.name,
        color=tag_update.color,
    )


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    await TagService.delete(db=db, tag_id=tag_id)
