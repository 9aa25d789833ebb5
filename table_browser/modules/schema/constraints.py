"""
Key constraint extraction and foreign key resolution

Reads INFORMATION_SCHEMA.KEY_COLUMN_USAGE and follows foreign key chains to
the primary key they ultimately point at. If tableA.foo references
tableB.bar and tableB.bar references tableC.baz, the resolved constraint maps
tableA.foo to tableC.baz.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Tuple

from sqlalchemy import column, select, table

from table_browser.core.database import Database
from table_browser.core.exceptions import BrokenForeignKeyError
from table_browser.schemas.table import Constraint, ConstraintType

logger = logging.getLogger(__name__)

# CONSTRAINT_NAME MySQL gives every primary key
PRIMARY_KEY_NAME = "PRIMARY"

KEY_COLUMN_USAGE = table(
    "KEY_COLUMN_USAGE",
    column("COLUMN_NAME"),
    column("CONSTRAINT_NAME"),
    column("REFERENCED_TABLE_NAME"),
    column("REFERENCED_COLUMN_NAME"),
    column("CONSTRAINT_SCHEMA"),
    column("TABLE_NAME"),
    column("ORDINAL_POSITION"),
    schema="INFORMATION_SCHEMA",
)


def constraint_from_row(row: Mapping[str, Any]) -> Constraint:
    """
    Classify one KEY_COLUMN_USAGE row

    PRIMARY names the primary key. A key named after its column is the
    single-column unique convention. Anything referencing another table is a
    foreign key. A named key without a referenced table is a unique key too.
    """
    column_name = row["COLUMN_NAME"]
    constraint_name = row["CONSTRAINT_NAME"]

    if constraint_name == PRIMARY_KEY_NAME:
        return Constraint(type=ConstraintType.PRIMARY, local_column=column_name)
    if constraint_name == column_name or row.get("REFERENCED_TABLE_NAME") is None:
        return Constraint(type=ConstraintType.UNIQUE, local_column=column_name)

    return Constraint(
        type=ConstraintType.FOREIGN,
        local_column=column_name,
        foreign_table=row["REFERENCED_TABLE_NAME"],
        foreign_column=row["REFERENCED_COLUMN_NAME"],
    )


class ConstraintResolver:
    """
    Lists raw key constraints and resolves foreign keys to their origin

    The lookup cache used while resolving lives only for one resolve() call,
    concurrent requests never share it.
    """

    def __init__(self, db: Database):
        self._db = db

    async def list_raw(self, schema: str, table_name: str) -> List[Constraint]:
        """Primary, unique and foreign key constraints of a table, by column position"""
        k = KEY_COLUMN_USAGE.c
        rows = await self._db.execute(
            select(
                k.COLUMN_NAME,
                k.CONSTRAINT_NAME,
                k.REFERENCED_TABLE_NAME,
                k.REFERENCED_COLUMN_NAME,
            )
            .where(k.CONSTRAINT_SCHEMA == schema)
            .where(k.TABLE_NAME == table_name)
            .order_by(k.ORDINAL_POSITION)
        )
        return [constraint_from_row(row) for row in rows]

    async def resolve(
        self,
        schema: str,
        originals: List[Constraint],
        max_hops: Optional[int] = None
    ) -> List[Constraint]:
        """
        Point every foreign key at the primary key its chain ends on

        Primary and unique constraints are returned unchanged. Each foreign
        key keeps its local column and gets the target of the last link before
        the primary key.

        Args:
            schema: Schema all referenced tables live in
            originals: Output of list_raw() for one table
            max_hops: Optional bound on the number of lookups per chain

        Raises:
            BrokenForeignKeyError: A referenced column has no constraint, the
                chain never reaches a primary key, loops, or is too long
        """
        cache: Dict[str, List[Constraint]] = {}

        async def lookup(table_name: str) -> List[Constraint]:
            if table_name not in cache:
                cache[table_name] = await self.list_raw(schema, table_name)
            return cache[table_name]

        resolved: List[Constraint] = []
        for original in originals:
            if original.type != ConstraintType.FOREIGN:
                resolved.append(original)
                continue
            resolved.append(await self._walk(original, lookup, max_hops))

        logger.debug(f"[Constraints] Resolved {len(resolved)} constraints in '{schema}', {len(cache)} tables looked up")
        return resolved

    @staticmethod
    async def _walk(
        original: Constraint,
        lookup: Callable[[str], Awaitable[List[Constraint]]],
        max_hops: Optional[int]
    ) -> Constraint:
        link = original
        visited: Set[Tuple[str, str]] = set()

        while True:
            target_table, target_column = link.foreign_table, link.foreign_column
            if (target_table, target_column) in visited:
                raise BrokenForeignKeyError(target_table, target_column, "foreign key chain forms a cycle")
            visited.add((target_table, target_column))
            if max_hops is not None and len(visited) > max_hops:
                raise BrokenForeignKeyError(target_table, target_column, f"chain longer than {max_hops} hops")

            candidates = [c for c in await lookup(target_table) if c.local_column == target_column]
            if not candidates:
                raise BrokenForeignKeyError(target_table, target_column)

            if any(c.type == ConstraintType.PRIMARY for c in candidates):
                return Constraint(
                    type=ConstraintType.FOREIGN,
                    local_column=original.local_column,
                    foreign_table=target_table,
                    foreign_column=target_column,
                )

            next_link = next((c for c in candidates if c.type == ConstraintType.FOREIGN), None)
            if next_link is None:
                raise BrokenForeignKeyError(target_table, target_column, "chain does not end on a primary key")
            link = next_link
