"""
TableMeta assembly

Fans out the five reads a table's metadata needs, runs them concurrently and
joins them into one TableMeta. Either every read succeeds or the first error
propagates, a partial TableMeta is never returned.
"""
import asyncio
import logging

from table_browser.modules.schema import table_name as names
from table_browser.modules.schema.catalog import TableDao
from table_browser.modules.schema.constraints import ConstraintResolver
from table_browser.schemas.table import TableMeta

logger = logging.getLogger(__name__)


class MetadataAssembler:

    def __init__(self, dao: TableDao, resolver: ConstraintResolver):
        self._dao = dao
        self._resolver = resolver

    async def _constraints(self, schema: str, table: str):
        originals = await self._resolver.list_raw(schema, table)
        return await self._resolver.resolve(schema, originals)

    async def assemble(self, schema: str, table: str) -> TableMeta:
        all_tables, headers, count, constraints, comment = await asyncio.gather(
            self._dao.tables(schema),
            self._dao.headers(schema, table),
            self._dao.count(schema, table),
            self._constraints(schema, table),
            self._dao.comment(schema, table),
        )

        # Only masters have parts
        masters = names.group_hierarchy(all_tables)
        master = next((m for m in masters if m.raw_name == table), None)
        parts = master.parts if master is not None else []

        logger.debug(
            f"[Metadata] {schema}.{table}: {len(headers)} headers, "
            f"{len(constraints)} constraints, {len(parts)} parts"
        )

        return TableMeta(
            name=table,
            headers=headers,
            total_rows=count,
            constraints=constraints,
            comment=comment,
            parts=parts,
        )
