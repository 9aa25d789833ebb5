"""
Table Browser service layer

Contains:
- TableService: schema listings, table metadata, content and inserts
"""

from table_browser.services.table_service import TableService, get_table_service

__all__ = [
    "TableService",
    "get_table_service",
]
