"""
Error taxonomy for workspace operations.

Every error is an HTTPException so guards and services can raise it directly
and FastAPI renders it as a structured payload:

    {"detail": {"detail": "<message>", "code": "<CODE>"}}
"""
from typing import Optional, Dict, Any
from fastapi import HTTPException, status


class WorkspaceError(HTTPException):
    """Base class carrying a machine-readable error code."""
    status_code_value = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        detail = {"detail": message, "code": self.code}
        if extra:
            detail.update(extra)
        super().__init__(status_code=self.status_code_value, detail=detail)
        self.message = message


class NotFoundError(WorkspaceError):
    """Referenced record does not exist."""
    status_code_value = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class AccessDeniedError(WorkspaceError):
    """Caller has no active membership or an insufficient role."""
    status_code_value = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"


class UnauthorizedError(WorkspaceError):
    """Missing or invalid caller credentials."""
    status_code_value = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ConflictError(WorkspaceError):
    """Request conflicts with the current state of a record."""
    status_code_value = status.HTTP_409_CONFLICT
    code = "CONFLICT"
