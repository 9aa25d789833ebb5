"""
Pydantic model definitions
"""
from table_browser.schemas.response import (
    ResponseCode,
    ApiResponse,
    success,
    error,
)
from table_browser.schemas.table import (
    # Enums
    TableTier,
    TableDataType,
    ConstraintType,
    DefaultKind,
    # Models
    DefaultValue,
    TableName,
    TierGroup,
    TableHeader,
    Constraint,
    TableMeta,
    Sort,
)

__all__ = [
    # Response envelope
    "ResponseCode",
    "ApiResponse",
    "success",
    "error",
    # Enums
    "TableTier",
    "TableDataType",
    "ConstraintType",
    "DefaultKind",
    # Models
    "DefaultValue",
    "TableName",
    "TierGroup",
    "TableHeader",
    "Constraint",
    "TableMeta",
    "Sort",
]
