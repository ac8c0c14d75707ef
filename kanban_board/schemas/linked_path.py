from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class LinkedPathCreate(BaseModel):
    """Bind a path to the project in the URL; an existing binding for the path is replaced"""
    path: str = Field(..., description="Filesystem path, matched as a literal prefix")
    hostname: Optional[str] = Field(None, description="Host the binding was created from")
    default_column_id: Optional[int] = Field(None, description="Column for tasks created from this path")


class LinkedPathDeleteByPath(BaseModel):
    path: str


class LinkedPathResponse(BaseModel):
    id: int
    project_id: int
    path: str
    hostname: Optional[str] = None
    default_column_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LinkedPathLookup(BaseModel):
    """Resolved binding plus the project name, so clients need no second request"""
    linked_path: LinkedPathResponse
    project_name: str
