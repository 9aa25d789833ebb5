"""
Table browsing API

Routes:
    GET  /api/v1/schemas                                       - List schemas
    GET  /api/v1/schemas/{schema}/tables                       - Master tables grouped by tier
    GET  /api/v1/schemas/{schema}/tables/{table}               - TableMeta of one table
    GET  /api/v1/schemas/{schema}/tables/{table}/data          - Paged table content
    POST /api/v1/schemas/{schema}/tables/{table}/data          - Insert a row (plus part rows)
    GET  /api/v1/schemas/{schema}/tables/{table}/column/{col}  - Distinct values of a column

Errors are turned into ApiResponse envelopes by the handlers registered in
table_browser.main.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Path, Query

from table_browser.core.exceptions import InvalidRequestError
from table_browser.schemas.response import ApiResponse, success
from table_browser.schemas.table import Sort
from table_browser.services.table_service import get_table_service

router = APIRouter(prefix="/schemas", tags=["Table browsing"])


def parse_sort(raw: Optional[str]) -> Optional[Sort]:
    """
    Parse a `column:direction` sort parameter

    The direction defaults to asc, e.g. "created" or "created:desc".
    """
    if not raw:
        return None
    by, _, direction = raw.rpartition(":")
    if not by:
        # No separator, the whole value is the column
        return Sort(by=raw)
    direction = direction.lower()
    if direction not in ("asc", "desc"):
        raise InvalidRequestError(f"sort direction must be 'asc' or 'desc', got '{direction}'")
    return Sort(by=by, direction=direction)


@router.get("", response_model=ApiResponse)
async def list_schemas():
    schemas = await get_table_service().schemas()
    return success(data={"items": schemas, "total": len(schemas)})


@router.get("/{schema}/tables", response_model=ApiResponse)
async def list_tables(schema: str = Path(..., description="Schema name")):
    """
    List the master tables of a schema

    Masters carry their part tables and are grouped by tier, in tier
    precedence order.
    """
    groups = await get_table_service().tables_by_tier(schema)
    return success(data=[group.model_dump(mode="json") for group in groups])


@router.get("/{schema}/tables/{table}", response_model=ApiResponse)
async def get_table_meta(
    schema: str = Path(..., description="Schema name"),
    table: str = Path(..., description="Raw table name")
):
    meta = await get_table_service().meta(schema, table)
    return success(data=meta.model_dump(mode="json"))


@router.get("/{schema}/tables/{table}/data", response_model=ApiResponse)
async def get_table_content(
    schema: str = Path(..., description="Schema name"),
    table: str = Path(..., description="Raw table name"),
    page: int = Query(1, description="1-based page number"),
    limit: Optional[int] = Query(None, description="Rows per page"),
    sort: Optional[str] = Query(None, description="column[:asc|desc]")
):
    rows = await get_table_service().content(schema, table, page, limit, parse_sort(sort))
    return success(data={"items": rows, "page": page, "count": len(rows)})


@router.post("/{schema}/tables/{table}/data", response_model=ApiResponse)
async def insert_table_row(
    schema: str = Path(..., description="Schema name"),
    table: str = Path(..., description="Raw name of the master table"),
    data: Dict[str, Any] = Body(..., description="Rows keyed by table name")
):
    """
    Insert a row into a master table, optionally with rows for its parts

    Body:
        {"orders": {...}, "orders__detail": [{...}, {...}]}
    """
    await get_table_service().insert_row(schema, table, data)
    return success(message="inserted")


@router.get("/{schema}/tables/{table}/column/{column}", response_model=ApiResponse)
async def get_column_content(
    schema: str = Path(..., description="Schema name"),
    table: str = Path(..., description="Raw table name"),
    column: str = Path(..., description="Column name")
):
    values = await get_table_service().column_content(schema, table, column)
    return success(data={"items": values, "total": len(values)})
