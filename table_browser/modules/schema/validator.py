"""
Validation of submitted rows

Checks a form submission against the headers of the target master table and
its part tables and returns the rows ready for insertion, keyed by table.

Accepted input shape:

    {
        "orders": {"id": 1, "customer": "ACME"},
        "orders__detail": [{"order_id": 1, "line": 1}, {"order_id": 1, "line": 2}]
    }

A table's entry is either one row (an object) or a list of rows.
"""
import asyncio
import logging
from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, create_model
from pydantic import ValidationError as PydanticValidationError

from table_browser.core.exceptions import ValidationError
from table_browser.modules.schema import table_name as names
from table_browser.modules.schema.catalog import TableDao
from table_browser.schemas.table import TableDataType, TableHeader

logger = logging.getLogger(__name__)

_SIMPLE_TYPES = {
    TableDataType.INTEGER: int,
    TableDataType.FLOAT: float,
    TableDataType.BOOLEAN: bool,
    TableDataType.DATE: date,
    TableDataType.DATETIME: datetime,
    TableDataType.BLOB: str,
}


def _python_type(header: TableHeader):
    if header.type == TableDataType.ENUM:
        return Literal[tuple(header.enum_values or ())]
    if header.type == TableDataType.STRING:
        if header.max_characters:
            return Annotated[str, StringConstraints(max_length=header.max_characters)]
        return str
    return _SIMPLE_TYPES[header.type]


def build_row_model(table: str, headers: List[TableHeader]) -> Type[BaseModel]:
    """
    Pydantic model accepting one row of `table`

    Columns that are nullable, have a default or are auto-incremented may be
    omitted. Only nullable columns accept an explicit null.
    """
    # Column names may clash with BaseModel attributes, fields are positional
    # and the column name is the alias
    fields: Dict[str, Any] = {}
    for position, header in enumerate(headers):
        python_type = _python_type(header)
        if header.nullable:
            fields[f"c{position}"] = (Optional[python_type], Field(None, alias=header.name))
        elif header.default_value.is_present or header.auto_increment:
            fields[f"c{position}"] = (python_type, Field(None, alias=header.name))
        else:
            fields[f"c{position}"] = (python_type, Field(..., alias=header.name))

    return create_model(
        f"{table}_row",
        __config__=ConfigDict(extra="forbid", protected_namespaces=()),
        **fields
    )


def _describe(table: str, index: Optional[int], error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "row"
    prefix = table if index is None else f"{table}[{index}]"
    return f"{prefix}.{location}: {error['msg']}"


class TableInputValidator:

    def __init__(self, dao: TableDao):
        self._dao = dao

    async def validate(self, schema: str, table: str, raw_input: Any) -> Dict[str, List[Dict[str, Any]]]:
        """
        Validate a submission for `table`

        Returns:
            Rows per target table, the master plus any submitted parts. Only
            the submitted columns are present so store defaults still apply.

        Raises:
            ValidationError: Any problem with the submission, all problems are
                reported at once
        """
        if not isinstance(raw_input, dict):
            raise ValidationError(["input must be an object mapping table names to rows"])

        all_tables = await self._dao.tables(schema)
        if not any(t.raw_name == table for t in all_tables):
            raise ValidationError([f"table '{table}' does not exist in schema '{schema}'"])

        # Parts and dangling parts (no master in the schema) take rows for themselves only
        master = next((m for m in names.group_hierarchy(all_tables) if m.raw_name == table), None)
        allowed = [table] + ([p.raw_name for p in master.parts] if master is not None else [])

        messages: List[str] = []
        for key in raw_input:
            if key not in allowed:
                messages.append(f"'{key}' is not '{table}' or one of its part tables")
        if table not in raw_input:
            messages.append(f"missing data for table '{table}'")
        if messages:
            raise ValidationError(messages)

        targets = [name for name in allowed if name in raw_input]
        all_headers = await asyncio.gather(*[self._dao.headers(schema, name) for name in targets])

        prepared: Dict[str, List[Dict[str, Any]]] = {}
        for name, headers in zip(targets, all_headers):
            rows = raw_input[name]
            single = isinstance(rows, dict)
            if single:
                rows = [rows]
            if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
                messages.append(f"{name}: expected an object or a list of objects")
                continue
            if name == table and not rows:
                messages.append(f"{name}: at least one row is required")
                continue

            model = build_row_model(name, headers)
            prepared[name] = []
            for index, row in enumerate(rows):
                try:
                    prepared[name].append(model.model_validate(row).model_dump(by_alias=True, exclude_unset=True))
                except PydanticValidationError as e:
                    messages.extend(_describe(name, None if single else index, err) for err in e.errors())

        if messages:
            logger.info(f"[Validator] Rejected submission for {schema}.{table}: {len(messages)} problems")
            raise ValidationError(messages)

        return prepared
