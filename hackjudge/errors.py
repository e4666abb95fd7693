"""
hackjudge/errors.py
Centralized API error handling

ERROR RESPONSE STRUCTURE:
{
    "success": false,
    "error": "ErrorType",
    "message": "Human-readable description",
    "code": "UNIQUE_ERROR_CODE",
    "details": {} (optional, for validation errors)
}

HTTP STATUS CODE DISCIPLINE:
- 400: Invalid submission (out-of-range rating, foreign criterion, project not scorable)
- 404: Resource does not exist
- 409: Stored data disagrees with its re-derivation (strict mode only)
- 422: Request body failed model validation
- 429: Rate limit exceeded
- 500: Never caused by user input
"""

import logging
import uuid
from typing import Optional, Dict, Any
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hackjudge.exceptions import (
    ScoringError, ProjectNotFoundError, ScoreNotFoundError
)

logger = logging.getLogger(__name__)


class ErrorCode:
    """Unique error codes for machine-readable error handling"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"

    NOT_FOUND = "NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    SCORE_NOT_FOUND = "SCORE_NOT_FOUND"

    PROJECT_NOT_SCORABLE = "PROJECT_NOT_SCORABLE"
    EVENT_MISMATCH = "EVENT_MISMATCH"
    CRITERION_NOT_IN_EVENT = "CRITERION_NOT_IN_EVENT"
    SCORE_OUT_OF_RANGE = "SCORE_OUT_OF_RANGE"

    TOTAL_MISMATCH = "TOTAL_MISMATCH"

    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response model"""
    success: bool = False
    error: str
    message: str
    code: str
    details: Optional[Dict[str, Any]] = None


class APIError(Exception):
    """Base API exception with consistent structure"""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.error = error
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": False,
            "error": self.error,
            "message": self.message,
            "code": self.code
        }
        if self.details:
            result["details"] = self.details
        return result

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


class BadRequestError(APIError):
    """400 Bad Request - Invalid input"""
    def __init__(self, message: str, code: str = ErrorCode.INVALID_INPUT, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="Bad Request",
            message=message,
            code=code,
            details=details
        )


class NotFoundError(APIError):
    """404 Not Found - Resource does not exist"""
    def __init__(self, message: str, code: str = ErrorCode.NOT_FOUND, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error="Not Found",
            message=message,
            code=code,
            details=details
        )


class ConflictError(APIError):
    """409 Conflict - Stored state is inconsistent"""
    def __init__(self, message: str, code: str, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error="Conflict",
            message=message,
            code=code,
            details=details
        )


class RateLimitedError(APIError):
    """429 Too Many Requests - slowapi limit hit"""
    def __init__(self, limit: str):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="Too Many Requests",
            message=f"Rate limit exceeded: {limit}",
            code=ErrorCode.RATE_LIMITED,
            details={"limit": limit}
        )


class InternalError(APIError):
    """500 Internal Server Error - Use sparingly, only for true internal failures"""
    def __init__(self, message: str = "An internal error occurred", log_id: Optional[str] = None):
        details = {"log_id": log_id} if log_id else None
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error="Internal Error",
            message=message,
            code=ErrorCode.INTERNAL_ERROR,
            details=details
        )


def from_scoring_error(exc: ScoringError) -> APIError:
    """Map a service-layer exception onto its HTTP shape."""
    if isinstance(exc, (ProjectNotFoundError, ScoreNotFoundError)):
        return NotFoundError(exc.message, code=exc.code, details=exc.details)
    # ScoreValidationError and anything else the judge can correct
    return BadRequestError(exc.message, code=exc.code, details=exc.details)


def new_log_id() -> str:
    return str(uuid.uuid4())[:8]


def log_internal(error: Exception, context: str = "") -> InternalError:
    """Log an internal error and build a safe 500 error"""
    log_id = new_log_id()
    logger.error(f"[{log_id}] Internal error in {context}: {type(error).__name__}: {str(error)}")
    return InternalError("An internal error occurred. Please try again later.", log_id=log_id)
