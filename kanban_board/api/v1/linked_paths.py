from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.project_service import ProjectService
from kanban_board.services.linked_path_service import LinkedPathService
from kanban_board.schemas.linked_path import (
    LinkedPathCreate,
    LinkedPathDeleteByPath,
    LinkedPathLookup,
    LinkedPathResponse
)

project_linked_paths_router = APIRouter(
    prefix="/projects/{project_id}/linked-paths",
    tags=["linked-paths"],
)

router = APIRouter(
    prefix="/linked-paths",
    tags=["linked-paths"],
)


@project_linked_paths_router.get("", response_model=List[LinkedPathResponse])
async def get_linked_paths(
    project_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    project = await ProjectService.get_by_id(db=db, project_id=project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return await LinkedPathService.get_by_project_id(db=db, project_id=project_id)


@project_linked_paths_router.post("", response_model=LinkedPathResponse)
async def bind_path(
    project_id: int,
    linked_path_create: LinkedPathCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Bind a path to the project; rebinding a known path updates it in place"""
    return await LinkedPathService.bind(
        db=db,
        project_id=project_id,
        path=linked_path_create.path,
        hostname=linked_path_create.hostname,
        default_column_id=linked_path_create.default_column_id
    )


@router.get("/lookup", response_model=LinkedPathLookup)
async def lookup_linked_path(
    path: str = Query(..., description="Directory to resolve"),
    hostname: Optional[str] = Query(None, description="Host the lookup comes from"),
    db: AsyncSession = Depends(get_async_session),
):
    """Resolve a directory to the most specific bound project"""
    linked_path, project_name = await LinkedPathService.resolve(db=db, path=path, hostname=hostname)
    return LinkedPathLookup(
        linked_path=LinkedPathResponse.model_validate(linked_path),
        project_name=project_name
    )


@router.delete("/by-path", status_code=status.HTTP_204_NO_CONTENT)
async def unbind_path_by_path(
    body: LinkedPathDeleteByPath,
    db: AsyncSession = Depends(get_async_session),
):
    await LinkedPathService.unbind_by_path(db=db, path=body.path)


@router.delete("/{linked_path_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unbind_path(
    linked_path_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    await LinkedPathService.unbind(db=db, linked_path_id=linked_path_id)
