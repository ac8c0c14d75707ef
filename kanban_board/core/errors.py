from fastapi import status


class BoardError(Exception):
    """Base class for every failure a board operation reports to its caller"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BoardError):
    """Referenced project/column/task/subtask/tag/binding does not exist"""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BoardError):
    """Unique value already taken (tag names)"""

    status_code = status.HTTP_409_CONFLICT


class ValidationError(BoardError):
    """Empty required field or a reference outside the allowed scope"""

    status_code = status.HTTP_400_BAD_REQUEST


class TransactionError(BoardError):
    """Store unavailable or failed mid-transaction; nothing was applied, safe to retry"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def require_text(value, field: str) -> str:
    """Strip a required text field and reject it when nothing is left"""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} must not be empty")
    return str(value).strip()
