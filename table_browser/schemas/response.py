"""
Unified response model

Global API response envelope, status code enum and factory functions
"""
from typing import TypeVar, Generic, Optional, Any
from pydantic import BaseModel, Field
from enum import IntEnum


# =============================================================================
# Status codes
# =============================================================================

class ResponseCode(IntEnum):
    """
    API response status codes

    - 0: success
    - 1xxx: client errors (parameters, input)
    - 2xxx: database errors
    - 3xxx: schema/catalog inconsistencies
    - 5xxx: internal errors
    """
    SUCCESS = 0

    # 1xxx - client errors
    PARAM_ERROR = 1001          # Bad request parameter
    VALIDATION_ERROR = 1004     # Submitted data failed validation

    # 2xxx - database errors
    DB_ERROR = 2001             # Store rejected the statement
    DB_CONNECTION_ERROR = 2002  # Store unreachable

    # 3xxx - catalog errors
    SCHEMA_ERROR = 3001         # Schema violates an assumption of the engine

    # 5xxx - internal errors
    INTERNAL_ERROR = 5000


# =============================================================================
# Response models
# =============================================================================

T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """
    Unified API response

    Every endpoint answers with:
    - code: status code, 0 means success
    - message: status description
    - data: payload (may be null)

    Example:
        success: {"code": 0, "message": "success", "data": {...}}
        failure: {"code": 1004, "message": "orders.id: Field required", "data": null}
    """
    code: int = Field(default=0, description="Status code, 0 means success")
    message: str = Field(default="success", description="Status description")
    data: Optional[T] = Field(default=None, description="Payload")


# =============================================================================
# Factory functions
# =============================================================================

def success(data: Any = None, message: str = "success") -> dict:
    """
    Build a success response

    Args:
        data: Payload
        message: Description
    """
    return {
        "code": ResponseCode.SUCCESS,
        "message": message,
        "data": data
    }


def error(
    code: ResponseCode = ResponseCode.INTERNAL_ERROR,
    message: str = "operation failed",
    data: Any = None
) -> dict:
    """
    Build an error response

    Args:
        code: Error status code
        message: Error description
        data: Extra data (optional)
    """
    return {
        "code": code,
        "message": message,
        "data": data
    }
