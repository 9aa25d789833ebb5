# tests/conftest.py
"""
In-memory stand-ins for the store.

- FakeDatabase: records executed SQLAlchemy statements and answers from a
  queue of canned results. transaction() keeps statements pending until work
  returns and discards them when it raises, like a rollback.
- FakeDao: TableDao replacement built from INFORMATION_SCHEMA.COLUMNS-shaped
  rows, for the assembler, validator and service tests.
"""
import asyncio
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.elements import quoted_name

from table_browser.modules.schema import table_name as names
from table_browser.modules.schema.catalog import header_from_row


def column_row(
    table: str,
    name: str,
    column_type: str,
    position: int,
    nullable: bool = False,
    default: Optional[str] = None,
    extra: str = "",
    max_characters: Optional[int] = None,
    comment: str = "",
) -> Dict[str, Any]:
    """One INFORMATION_SCHEMA.COLUMNS row"""
    return {
        "COLUMN_NAME": name,
        "ORDINAL_POSITION": position,
        "IS_NULLABLE": "YES" if nullable else "NO",
        "DATA_TYPE": column_type.split("(")[0],
        "CHARACTER_MAXIMUM_LENGTH": max_characters,
        "NUMERIC_SCALE": None,
        "NUMERIC_PRECISION": None,
        "CHARACTER_SET_NAME": "utf8mb4" if max_characters else None,
        "COLUMN_TYPE": column_type,
        "COLUMN_COMMENT": comment,
        "TABLE_NAME": table,
        "COLUMN_DEFAULT": default,
        "EXTRA": extra,
    }


def run(coro):
    return asyncio.run(coro)


class FakeDatabase:

    def __init__(self, results: Optional[List[List[Dict[str, Any]]]] = None, fail_on: Optional[str] = None):
        self.results = list(results or [])
        self.fail_on = fail_on
        self.executed: List[Any] = []
        self.raw: List[str] = []
        self.rolled_back = False
        self._pending: Optional[List[Any]] = None

    def identifier(self, name: str) -> quoted_name:
        return quoted_name(name, quote=True)

    def escape_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def _next_result(self) -> List[Dict[str, Any]]:
        return self.results.pop(0) if self.results else []

    async def execute_raw(self, sql: str, params=None) -> List[Dict[str, Any]]:
        self.raw.append(sql)
        return self._next_result()

    async def execute(self, statement) -> List[Dict[str, Any]]:
        target = getattr(statement, "table", None)
        if self.fail_on is not None and getattr(target, "name", None) == self.fail_on:
            raise IntegrityError("INSERT", {}, Exception(f"Duplicate entry for {self.fail_on}"))
        if self._pending is not None:
            self._pending.append(statement)
        else:
            self.executed.append(statement)
        return self._next_result()

    async def transaction(self, work):
        self._pending = []
        try:
            result = await work()
        except BaseException:
            self.rolled_back = True
            raise
        else:
            self.executed.extend(self._pending)
            return result
        finally:
            self._pending = None


class FakeDao:

    def __init__(
        self,
        columns: Dict[str, List[Dict[str, Any]]],
        counts: Optional[Dict[str, int]] = None,
        comments: Optional[Dict[str, str]] = None,
    ):
        self.columns = columns
        self.counts = counts or {}
        self.comments = comments or {}

    async def tables(self, schema: str):
        return [names.parse(raw) for raw in self.columns]

    async def headers(self, schema: str, table_name: str):
        return [header_from_row(row) for row in self.columns.get(table_name, [])]

    async def count(self, schema: str, table_name: str) -> int:
        return self.counts.get(table_name, 0)

    async def comment(self, schema: str, table_name: str) -> str:
        return self.comments.get(table_name, "")


@pytest.fixture
def orders_columns():
    """orders with one part table and an unrelated customers table"""
    return {
        "orders": [
            column_row("orders", "id", "int(11)", 1, extra="auto_increment"),
            column_row("orders", "customer", "varchar(8)", 2, max_characters=8),
            column_row("orders", "status", "enum('open','closed')", 3, default="open"),
            column_row("orders", "paid", "tinyint(1)", 4, default="0"),
            column_row("orders", "note", "varchar(255)", 5, nullable=True, max_characters=255),
        ],
        "orders__detail": [
            column_row("orders__detail", "order_id", "int(11)", 1),
            column_row("orders__detail", "line", "int(11)", 2),
            column_row("orders__detail", "amount", "decimal(10,2)", 3, default="0.00"),
        ],
        "customers": [
            column_row("customers", "name", "varchar(8)", 1, max_characters=8),
        ],
    }


@pytest.fixture
def fake_dao(orders_columns):
    return FakeDao(
        orders_columns,
        counts={"orders": 42, "orders__detail": 7},
        comments={"orders": "Customer orders"},
    )
