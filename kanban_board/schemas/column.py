from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ColumnCreate(BaseModel):
    """Schema for column creation"""
    name: str


class ColumnUpdate(BaseModel):
    """Schema for column update"""
    name: Optional[str] = None
    sort_order: Optional[int] = None


class ColumnResponse(BaseModel):
    """Schema for column response"""
    id: int
    project_id: int
    name: str
    sort_order: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
