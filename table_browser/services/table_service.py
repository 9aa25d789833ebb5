"""
Table service

Public entry point of the browser backend. Wires the catalog reads, the
constraint resolver, the metadata assembler, the input validator and the
insert orchestrator over one Database helper.

Usage:
    table_service = get_table_service()
    meta = await table_service.meta("lab", "_scan")
    await table_service.insert_row("lab", "orders", {"orders": {...}})
"""
import logging
from typing import Any, Dict, List, Optional, Union

from table_browser.core.config import get_settings
from table_browser.core.database import Database, get_database
from table_browser.core.exceptions import InvalidRequestError
from table_browser.modules.schema import table_name as names
from table_browser.modules.schema.assembler import MetadataAssembler
from table_browser.modules.schema.catalog import TableDao
from table_browser.modules.schema.constraints import ConstraintResolver
from table_browser.modules.schema.inserter import InsertOrchestrator
from table_browser.modules.schema.validator import TableInputValidator
from table_browser.schemas.table import Sort, TableMeta, TableName, TierGroup

logger = logging.getLogger(__name__)


class TableService:
    """
    Table browsing service

    Features:
    1. Schema and table listings (tables grouped into masters and parts)
    2. TableMeta for a single table
    3. Paged content and distinct column values
    4. Validated multi-table inserts
    """

    def __init__(self, db: Database):
        self._dao = TableDao(db)
        self._resolver = ConstraintResolver(db)
        self._assembler = MetadataAssembler(self._dao, self._resolver)
        self._validator = TableInputValidator(self._dao)
        self._inserter = InsertOrchestrator(db, self._validator)
        self._settings = get_settings()

    async def schemas(self) -> List[str]:
        return await self._dao.schemas()

    async def tables(self, schema: str) -> List[TableName]:
        """Master tables of a schema, each carrying its part tables"""
        return names.group_hierarchy(await self._dao.tables(schema))

    async def tables_by_tier(self, schema: str) -> List[TierGroup]:
        """Master tables grouped by tier, in tier precedence order"""
        return names.group_by_tier(await self.tables(schema))

    async def meta(self, schema: str, table: str) -> TableMeta:
        return await self._assembler.assemble(schema, table)

    async def content(
        self,
        schema: str,
        table: str,
        page: int = 1,
        limit: Optional[int] = None,
        sort: Optional[Sort] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch a page of a table's rows

        Args:
            page: 1-based page number
            limit: Rows per page, CONTENT_DEFAULT_LIMIT when omitted
            sort: Optional column/direction to sort by
        """
        if limit is None:
            limit = self._settings.CONTENT_DEFAULT_LIMIT
        if limit > self._settings.CONTENT_MAX_LIMIT:
            raise InvalidRequestError(f"limit must be <= {self._settings.CONTENT_MAX_LIMIT}, got {limit}")
        return await self._dao.content(schema, table, page, limit, sort)

    async def column_content(self, schema: str, table: str, column: str) -> List[Union[str, int, float]]:
        return await self._dao.column_content(schema, table, column)

    async def insert_row(self, schema: str, table: str, data: Any) -> None:
        await self._inserter.insert_row(schema, table, data)


# Singleton
_table_service_instance: Optional[TableService] = None


def get_table_service() -> TableService:
    """
    Get the TableService singleton

    Returns:
        TableService instance
    """
    global _table_service_instance
    if _table_service_instance is None:
        _table_service_instance = TableService(get_database())
    return _table_service_instance
