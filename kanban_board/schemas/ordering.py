from typing import Optional
from pydantic import BaseModel


class ReorderItem(BaseModel):
    """One entry of a bulk reorder payload.

    When sort_order is omitted the item's position in the payload decides its key.
    """
    id: int
    sort_order: Optional[int] = None


class MessageResponse(BaseModel):
    message: str
