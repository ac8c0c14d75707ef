from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class TagBase(BaseModel):
    """Base tag schema"""
    name: str = Field(..., max_length=50, description="Tag name, unique across the catalog")
    color: str = Field("#6b7280", max_length=7, description="Tag colour (HEX)")


class TagCreate(TagBase):
    """Schema for tag creation"""
    pass


class TagUpdate(BaseModel):
    """Schema for tag update"""
    name: Optional[str] = Field(None, max_length=50, description="Tag name")
    color: Optional[str] = Field(None, max_length=7, description="Tag colour (HEX)")


class TagResponse(TagBase):
    """Schema for tag response"""
    id: int = Field(..., description="Tag identifier")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
