"""
Error taxonomy of the metadata engine

Every error here is fatal to the request that raised it, nothing is retried.
Catalog inconsistencies carry the offending identifier so an operator can
find the problem in the schema.
"""
from enum import Enum
from typing import List, Optional


class ErrorCodes(Enum):
    UNRECOGNIZED_TYPE = "unrecognized_type"
    MALFORMED_ENUM = "malformed_enum"
    UNSUPPORTED_DEFAULT = "unsupported_default"
    BROKEN_FOREIGN_KEY = "broken_foreign_key"
    UNKNOWN_TIER_ORDERING = "unknown_tier_ordering"
    VALIDATION_FAILED = "validation_failed"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED_VALUE = "unexpected_value"


class TableBrowserError(Exception):
    def __init__(self, code: ErrorCodes, message: str, details: Optional[str] = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"{code.value}: {message}")


class CatalogError(TableBrowserError):
    """The target schema violates an assumption of the engine"""


class UnrecognizedTypeError(CatalogError):
    def __init__(self, raw_type: str):
        self.raw_type = raw_type
        super().__init__(
            ErrorCodes.UNRECOGNIZED_TYPE,
            f"Could not determine TableDataType for raw type '{raw_type}'"
        )


class MalformedEnumError(CatalogError):
    def __init__(self, raw_type: str):
        self.raw_type = raw_type
        super().__init__(
            ErrorCodes.MALFORMED_ENUM,
            f"Could not extract enum values from '{raw_type}'"
        )


class UnsupportedDefaultError(CatalogError):
    def __init__(self, data_type: str, raw_default: Optional[str]):
        self.data_type = data_type
        self.raw_default = raw_default
        super().__init__(
            ErrorCodes.UNSUPPORTED_DEFAULT,
            f"Could not determine default value for type={data_type} (raw default: {raw_default!r})"
        )


class BrokenForeignKeyError(CatalogError):
    def __init__(self, table: str, column: str, reason: str = "no matching constraint"):
        self.table = table
        self.column = column
        super().__init__(
            ErrorCodes.BROKEN_FOREIGN_KEY,
            f"Broken foreign key at '{table}.{column}': {reason}"
        )


class UnknownTierOrderingError(TableBrowserError):
    def __init__(self, tier):
        self.tier = tier
        super().__init__(ErrorCodes.UNKNOWN_TIER_ORDERING, f"unexpected tier: {tier}")


class ValidationError(TableBrowserError):
    """Submitted row data does not fit the table's headers"""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__(
            ErrorCodes.VALIDATION_FAILED,
            "; ".join(self.messages) or "invalid input"
        )


class InvalidRequestError(TableBrowserError):
    def __init__(self, message: str):
        super().__init__(ErrorCodes.INVALID_REQUEST, message)
