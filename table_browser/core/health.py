import logging
from table_browser.core.database import get_database

logger = logging.getLogger(__name__)

async def check_mysql() -> str:
    """Check connection to the MySQL store."""
    try:
        rows = await get_database().execute_raw("SELECT VERSION() AS version")
        return f"connected (MySQL {rows[0]['version']})" if rows else "connected"
    except Exception as e:
        logger.error(f"MySQL check failed: {e}")
        return f"failed: {str(e)}"
