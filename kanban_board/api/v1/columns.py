from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.project_service import ProjectService
from kanban_board.services.column_service import ColumnService
from kanban_board.schemas.ordering import ReorderItem, MessageResponse
from kanban_board.schemas.column import (
    ColumnCreate,
    ColumnResponse,
    ColumnUpdate
)

# Columns are created, listed and reordered under their project
project_columns_router = APIRouter(
    prefix="/projects/{project_id}/columns",
    tags=["columns"],
)

router = APIRouter(
    prefix="/columns",
    tags=["columns"],
)


@project_columns_router.put("/reorder", response_model=MessageResponse)
async def reorder_columns(
    project_id: int,
    items: List[ReorderItem],
    db: AsyncSession = Depends(get_async_session),
):
    """Reorder columns of a project; only that project's columns are touched"""
    await ColumnService.reorder(db=db, project_id=project_id, items=items)
    return {"message": "Columns reordered successfully"}


@project_columns_router.get("", response_model=List[ColumnResponse])
async def get_columns(
    project_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get all columns of a project in board order"""
    project = await ProjectService.get_by_id(db=db, project_id=project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return await ColumnService.get_by_project_id(db=db, project_id=project_id)


@project_columns_router.post("", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED)
async def create_column(
    project_id: int,
    column_create: ColumnCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Append a column to a project"""
    return await ColumnService.create(
        db=db,
        project_id=project_id,
        name=column_create.name
    )


@router.get("/{column_id}", response_model=ColumnResponse)
async def get_column(
    column_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    column = await ColumnService.get_by_id(db=db, column_id=column_id)
    if not column:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Column not found"
        )
    return column


@router.put("/{column_id}", response_model=ColumnResponse)
async def update_column(
    column_id: int,
    column_update: ColumnUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Rename a column or set its sort key"""
    return await ColumnService.update(
        db=db,
        column_id=column_id,
        name=column_update.name,
        sort_order=column_update.sort_order
    )


@router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(
    column_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a column and its tasks"""
    await ColumnService.delete(db=db, column_id=column_id)
