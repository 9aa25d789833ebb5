"""
Catalog and content reads

TableDao issues every read query of the browser: schema and table listings,
column headers from INFORMATION_SCHEMA, row counts, table comments, paged
table content and distinct column values.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import column, func, literal_column, select, table

from table_browser.core.database import Database
from table_browser.core.exceptions import ErrorCodes, InvalidRequestError, TableBrowserError
from table_browser.modules.schema import table_name as names
from table_browser.modules.schema import types
from table_browser.schemas.table import Sort, TableDataType, TableHeader, TableName

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
# Sent instead of the binary content of blob columns
BLOB_STRING_REPRESENTATION = "<blob>"

COLUMNS = table(
    "COLUMNS",
    column("COLUMN_NAME"),
    column("ORDINAL_POSITION"),
    column("IS_NULLABLE"),
    column("DATA_TYPE"),
    column("CHARACTER_MAXIMUM_LENGTH"),
    column("NUMERIC_SCALE"),
    column("NUMERIC_PRECISION"),
    column("CHARACTER_SET_NAME"),
    column("COLUMN_TYPE"),
    column("COLUMN_COMMENT"),
    column("TABLE_NAME"),
    column("COLUMN_DEFAULT"),
    column("EXTRA"),
    column("TABLE_SCHEMA"),
    schema="INFORMATION_SCHEMA",
)

TABLES = table(
    "TABLES",
    column("TABLE_COMMENT"),
    column("TABLE_NAME"),
    column("TABLE_SCHEMA"),
    schema="INFORMATION_SCHEMA",
)

HEADER_FIELDS = [
    "COLUMN_NAME", "ORDINAL_POSITION", "IS_NULLABLE", "DATA_TYPE",
    "CHARACTER_MAXIMUM_LENGTH", "NUMERIC_SCALE", "NUMERIC_PRECISION",
    "CHARACTER_SET_NAME", "COLUMN_TYPE", "COLUMN_COMMENT", "TABLE_NAME",
    "COLUMN_DEFAULT", "EXTRA",
]


def header_from_row(row: Mapping[str, Any]) -> TableHeader:
    """Build a TableHeader from one INFORMATION_SCHEMA.COLUMNS row"""
    raw_type = row["COLUMN_TYPE"]
    data_type = types.classify(raw_type)
    numerical = types.is_numerical(data_type)

    return TableHeader(
        name=row["COLUMN_NAME"],
        type=data_type,
        raw_type=raw_type,
        is_numerical=numerical,
        is_textual=not numerical,
        signed=numerical and "unsigned" not in raw_type,
        ordinal_position=row["ORDINAL_POSITION"],
        nullable=row["IS_NULLABLE"] == "YES",
        max_characters=row.get("CHARACTER_MAXIMUM_LENGTH"),
        charset=row.get("CHARACTER_SET_NAME"),
        numeric_precision=row.get("NUMERIC_PRECISION"),
        numeric_scale=row.get("NUMERIC_SCALE"),
        enum_values=types.extract_enum_values(raw_type),
        default_value=types.resolve_default(raw_type, data_type, row.get("COLUMN_DEFAULT")),
        auto_increment="auto_increment" in (row.get("EXTRA") or ""),
        comment=row.get("COLUMN_COMMENT") or "",
        table_name=row["TABLE_NAME"],
    )


class TableDao:
    """Read access to one MySQL server's schemas"""

    def __init__(self, db: Database):
        self._db = db

    def _table(self, schema: str, table_name: str):
        return table(self._db.identifier(table_name), schema=self._db.identifier(schema))

    async def schemas(self) -> List[str]:
        rows = await self._db.execute_raw("SHOW SCHEMAS")
        return [next(iter(row.values())) for row in rows]

    async def tables(self, schema: str) -> List[TableName]:
        """Flat list of every table in the schema, tiers classified"""
        rows = await self._db.execute_raw("SHOW TABLES FROM " + self._db.escape_identifier(schema))
        return [names.parse(next(iter(row.values()))) for row in rows]

    async def headers(self, schema: str, table_name: str) -> List[TableHeader]:
        """Column headers ordered by ordinal position"""
        c = COLUMNS.c
        rows = await self._db.execute(
            select(*[c[field] for field in HEADER_FIELDS])
            .where(c.TABLE_SCHEMA == schema)
            .where(c.TABLE_NAME == table_name)
            .order_by(c.ORDINAL_POSITION)
        )
        return [header_from_row(row) for row in rows]

    async def count(self, schema: str, table_name: str) -> int:
        rows = await self._db.execute(
            select(func.count().label("total")).select_from(self._table(schema, table_name))
        )
        # This query returns exactly one row
        return int(rows[0]["total"])

    async def comment(self, schema: str, table_name: str) -> str:
        """Table comment, empty when there is none"""
        t = TABLES.c
        rows = await self._db.execute(
            select(t.TABLE_COMMENT)
            .where(t.TABLE_NAME == table_name)
            .where(t.TABLE_SCHEMA == schema)
        )
        return (rows[0]["TABLE_COMMENT"] or "") if rows else ""

    async def content(
        self,
        schema: str,
        table_name: str,
        page: int = 1,
        limit: int = 25,
        sort: Optional[Sort] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch one page of rows

        Pages are 1-indexed: page 1 holds rows [0, limit), page 2 holds
        [limit, 2 * limit) and so on. Date values are formatted with
        DATE_FORMAT/DATETIME_FORMAT and blob values are replaced with
        BLOB_STRING_REPRESENTATION.
        """
        if page < 1:
            raise InvalidRequestError(f"page must be >= 1, got {page}")
        if limit < 1:
            raise InvalidRequestError(f"limit must be >= 1, got {limit}")

        query = (
            select(literal_column("*"))
            .select_from(self._table(schema, table_name))
            .limit(limit)
            .offset((page - 1) * limit)
        )
        if sort is not None:
            sort_column = column(self._db.identifier(sort.by))
            query = query.order_by(sort_column.asc() if sort.direction == "asc" else sort_column.desc())

        rows = await self._db.execute(query)

        # Headers decide how dates and blobs are represented
        headers = {h.name: h for h in await self.headers(schema, table_name)}
        for row in rows:
            for col, value in row.items():
                header = headers.get(col)
                if header is not None and header.type == TableDataType.BLOB:
                    row[col] = BLOB_STRING_REPRESENTATION
                elif isinstance(value, (date, datetime)):
                    row[col] = self._format_date(header, col, value)

        return rows

    @staticmethod
    def _format_date(header: Optional[TableHeader], col: str, value: date) -> str:
        if header is None:
            raise TableBrowserError(ErrorCodes.UNEXPECTED_VALUE, f"Could not find header with name {col}")
        if header.type == TableDataType.DATE:
            return value.strftime(DATE_FORMAT)
        if header.type == TableDataType.DATETIME:
            return value.strftime(DATETIME_FORMAT)
        raise TableBrowserError(
            ErrorCodes.UNEXPECTED_VALUE,
            f"Header {header.name} unexpectedly had a date value in it"
        )

    async def column_content(self, schema: str, table_name: str, col: str) -> List[Union[str, int, float]]:
        """Distinct values of one column in ascending order, e.g. for autocomplete"""
        target = column(self._db.identifier(col))
        rows = await self._db.execute(
            select(target)
            .distinct()
            .select_from(self._table(schema, table_name))
            .order_by(target)
        )
        return [next(iter(row.values())) for row in rows]
