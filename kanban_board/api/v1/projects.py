from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.project_service import ProjectService
from kanban_board.schemas.ordering import ReorderItem, MessageResponse
from kanban_board.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectDetail
)

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
)


@router.put("/reorder", response_model=MessageResponse)
async def reorder_projects(
    items: List[ReorderItem],
    db: AsyncSession = Depends(get_async_session),
):
    """Apply new sort keys to many projects at once (all or nothing)"""
    await ProjectService.reorder(db=db, items=items)
    return {"message": "Projects reordered successfully"}


@router.get("", response_model=List[ProjectResponse])
async def get_projects(
    db: AsyncSession = Depends(get_async_session),
):
    """List projects in board order"""
    return await ProjectService.get_all(db=db)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_create: ProjectCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a project with the five default columns"""
    return await ProjectService.create(db=db, name=project_create.name)


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get a project with its columns and their tasks"""
    project = await ProjectService.get_expanded(db=db, project_id=project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Rename a project"""
    return await ProjectService.update(db=db, project_id=project_id, name=project_update.name)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a project and everything under it"""
    await ProjectService.delete(db=db, project_id=project_id)
