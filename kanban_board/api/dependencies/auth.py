import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from kanban_board.core import Settings, get_settings
from kanban_board.logs import api_logger

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    api_key: Optional[str] = Depends(api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the shared secret sent in the X-API-Key header

    Raises:
        HTTPException: 401 if the server has no key configured, or the header
        is missing or does not match
    """
    if not settings.KANBAN_API_KEY:
        api_logger.error("KANBAN_API_KEY is not set, rejecting API request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="KANBAN_API_KEY environment variable not set",
        )

    if not api_key or not hmac.compare_digest(api_key.encode(), settings.KANBAN_API_KEY.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
