"""
Export script: TableMeta of every table in a schema
Connects to the configured MySQL server, assembles the metadata of every
table (masters and parts) and saves it as one JSON file.

Usage:
    python scripts/export_meta.py <schema> [-o output.json]
"""
import argparse
import asyncio
import json
import os
import sys
import logging

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from table_browser.core.database import close_database, get_database
from table_browser.services.table_service import TableService

# Ensure logging is configured to show info
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("export_meta")


async def collect(schema: str) -> dict:
    service = TableService(get_database())
    try:
        masters = await service.tables(schema)
        raw_names = [t.raw_name for m in masters for t in [m, *m.parts]]
        logger.info(f"Found {len(masters)} master tables, {len(raw_names)} tables in total")

        tables = []
        for raw_name in raw_names:
            meta = await service.meta(schema, raw_name)
            tables.append(meta.model_dump(mode="json"))
            logger.info(f"  {raw_name}: {len(meta.headers)} columns, {meta.total_rows} rows")

        return {
            "schema_name": schema,
            "tiers": [group.model_dump(mode="json") for group in await service.tables_by_tier(schema)],
            "tables": tables
        }
    finally:
        await close_database()


def export_and_save(schema: str, output_path: str):
    try:
        logger.info(f"Starting metadata export for schema '{schema}'...")
        data = asyncio.run(collect(schema))

        output_dir = os.path.dirname(os.path.abspath(output_path))
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Metadata saved to: {output_path}")

    except Exception as e:
        logger.error(f"CRITICAL ERROR: Failed to export metadata: {e}")
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export the TableMeta of every table in a schema")
    parser.add_argument("schema", help="Schema to export")
    parser.add_argument(
        "-o", "--output",
        default=os.path.join(os.path.dirname(__file__), "data", "table_meta.json"),
        help="Output file (default: scripts/data/table_meta.json)"
    )
    args = parser.parse_args()
    export_and_save(args.schema, args.output)
