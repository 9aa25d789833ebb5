"""
Table Browser logging configuration

Usage:
    from table_browser.core.logging import setup_logging
    setup_logging(debug=False)
"""
import logging
import sys
from typing import Optional

def setup_logging(
    debug: bool = False,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None
) -> None:
    """
    Configure the root logger

    Args:
        debug: Log at DEBUG level instead of INFO
        log_format: Custom log format (optional)
        date_format: Custom date format (optional)
    """
    level = logging.DEBUG if debug else logging.INFO

    # Default format: timestamp, level, module name
    default_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    default_date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format or default_format,
        datefmt=date_format or default_date_format,
        stream=sys.stdout,
        force=True
    )

    # Keep third-party libraries quiet
    noisy_loggers = [
        "httpx",
        "httpcore",
        "aiomysql",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "uvicorn.access",
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    logging.info(f"Logging configured: level={'DEBUG' if debug else 'INFO'}")
