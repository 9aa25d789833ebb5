"""
Multi-table row insertion

A submission for a master table may carry rows for its part tables too. All
of them are written in one transaction, the master first so the parts' foreign
keys resolve. Any failure rolls the whole submission back.
"""
import logging
from itertools import groupby
from typing import Any, Dict, List

from sqlalchemy import column, insert, table

from table_browser.core.database import Database
from table_browser.modules.schema import table_name as names
from table_browser.modules.schema.types import prepare_value
from table_browser.modules.schema.validator import TableInputValidator

logger = logging.getLogger(__name__)


def insertion_order(master: str, targets: List[str]) -> List[str]:
    """
    Order in which the tables of one submission are written

    The master comes first, then its parts in lexicographic order. Under the
    naming grammar that equals a plain sort, but the order is derived from the
    hierarchy rather than from the strings.
    """
    parts = sorted(
        name for name in targets
        if name != master and names.parse(name).master_raw_name == master
    )
    # Anything that isn't the master or one of its parts goes last, in sort order
    others = sorted(name for name in targets if name != master and name not in parts)
    head = [master] if master in targets else []
    return head + parts + others


class InsertOrchestrator:

    def __init__(self, db: Database, validator: TableInputValidator):
        self._db = db
        self._validator = validator

    def _prepare_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Escape column names and convert values to their storage form"""
        return {self._db.identifier(name): prepare_value(value) for name, value in row.items()}

    def _insert_statements(self, schema: str, table_name: str, rows: List[Dict[str, Any]]):
        """One multi-row INSERT per run of consecutive rows with the same columns"""
        prepared = [self._prepare_row(row) for row in rows]

        # Consecutive runs only, rows are written in submission order
        for columns, batch in groupby(prepared, key=lambda row: tuple(row.keys())):
            target = table(
                self._db.identifier(table_name),
                *[column(name) for name in columns],
                schema=self._db.identifier(schema),
            )
            yield insert(target).values(list(batch))

    async def insert_row(self, schema: str, table_name: str, data: Any) -> None:
        """
        Validate `data` and insert it into `table_name` and its part tables

        Raises:
            ValidationError: The submission does not fit the headers
            sqlalchemy.exc.SQLAlchemyError: The store rejected a row, nothing
                was written
        """
        prepared = await self._validator.validate(schema, table_name, data)
        order = insertion_order(table_name, list(prepared.keys()))

        async def work():
            for name in order:
                rows = prepared[name]
                if not rows:
                    continue
                for statement in self._insert_statements(schema, name, rows):
                    await self._db.execute(statement)
                logger.debug(f"[Insert] {schema}.{name}: {len(rows)} rows")

        await self._db.transaction(work)
        logger.info(f"[Insert] Inserted into {schema}.{table_name} ({', '.join(order)})")
