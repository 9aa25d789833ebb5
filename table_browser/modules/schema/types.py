"""
Type inference for raw catalog column types

Maps INFORMATION_SCHEMA.COLUMNS.COLUMN_TYPE strings ("tinyint(1)",
"varchar(64)", "enum('a','b')", ...) onto the closed TableDataType set and
derives typed default values from COLUMN_DEFAULT.
"""
import re
from typing import Any, List, Optional

from table_browser.core.exceptions import (
    MalformedEnumError,
    UnrecognizedTypeError,
    UnsupportedDefaultError,
)
from table_browser.schemas.table import DefaultValue, TableDataType

# Catalog default of columns filled in with the insertion time
CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"

NUMERICAL_TYPES = (TableDataType.INTEGER, TableDataType.FLOAT)

_ENUM_PATTERN = re.compile(r"^enum\('(.*)'\)$", re.DOTALL)


def classify(raw_type: str) -> TableDataType:
    """
    Determine the canonical type of a raw column type

    Rules are checked in order, the first match wins.

    Raises:
        UnrecognizedTypeError: No rule matches
    """
    if "tinyint(1)" in raw_type:
        return TableDataType.BOOLEAN
    if "int" in raw_type:
        return TableDataType.INTEGER
    if "double" in raw_type or "float" in raw_type or "decimal" in raw_type:
        return TableDataType.FLOAT
    if raw_type == "date":
        return TableDataType.DATE
    if raw_type == "datetime" or raw_type == "timestamp":
        return TableDataType.DATETIME
    if raw_type.startswith("enum"):
        return TableDataType.ENUM
    if "char" in raw_type:
        return TableDataType.STRING
    if "blob" in raw_type:
        return TableDataType.BLOB

    raise UnrecognizedTypeError(raw_type)


def is_numerical(data_type: TableDataType) -> bool:
    return data_type in NUMERICAL_TYPES


def extract_enum_values(raw_type: str) -> Optional[List[str]]:
    """
    Pull the allowed values out of an enum column type

        >>> extract_enum_values("enum('a','b','c')")
        ['a', 'b', 'c']
        >>> extract_enum_values("int(11)") is None
        True

    Raises:
        MalformedEnumError: Type starts like an enum but isn't a list of
            quoted literals
    """
    if not raw_type.startswith("enum("):
        return None

    match = _ENUM_PATTERN.match(raw_type)
    if match is None:
        raise MalformedEnumError(raw_type)
    # Quotes inside values are doubled
    return [value.replace("''", "'") for value in match.group(1).split("','")]


def resolve_default(raw_type: str, data_type: TableDataType, raw_default: Optional[str]) -> DefaultValue:
    """
    Turn COLUMN_DEFAULT into a DefaultValue

    Args:
        raw_type: COLUMN_TYPE of the column
        data_type: Canonical type from classify()
        raw_default: COLUMN_DEFAULT, None when the catalog reports no default

    Raises:
        UnsupportedDefaultError: Numeric default that does not parse, or a
            type outside TableDataType
    """
    if raw_default == CURRENT_TIMESTAMP and raw_type == "datetime":
        return DefaultValue.named_constant(CURRENT_TIMESTAMP)

    if data_type == TableDataType.BLOB:
        # Don't leak any blob data
        return DefaultValue.null()

    if raw_default is None:
        return DefaultValue.none()
    # MariaDB reports an explicit NULL default as the text NULL
    if raw_default == "NULL":
        return DefaultValue.null()

    try:
        if data_type == TableDataType.INTEGER:
            return DefaultValue.literal(int(raw_default))
        if data_type == TableDataType.FLOAT:
            return DefaultValue.literal(float(raw_default))
        if data_type == TableDataType.BOOLEAN:
            return DefaultValue.literal(int(raw_default) != 0)
    except ValueError:
        raise UnsupportedDefaultError(data_type.value, raw_default)

    if data_type in (TableDataType.STRING, TableDataType.ENUM,
                     TableDataType.DATE, TableDataType.DATETIME):
        return DefaultValue.literal(raw_default)

    raise UnsupportedDefaultError(str(data_type), raw_default)


def prepare_value(value: Any) -> Any:
    """Convert a submitted value to its storage form: True -> 1, False -> 0"""
    if isinstance(value, bool):
        return 1 if value else 0
    return value
