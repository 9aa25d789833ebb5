"""
Table Browser backend entry point

Usage:
    python run.py              # development mode
    python run.py --prod       # production mode

Serves:
    - HTTP API:     http://localhost:8000/api/v1/
    - API docs:     http://localhost:8000/docs
    - Health check: http://localhost:8000/health
"""
import os
import sys
import argparse

# Make sure the project root is importable
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


def print_banner(host: str, port: int):
    banner = f"""
+--------------------------------------------------------------+
|                    Table Browser Backend                     |
+--------------------------------------------------------------+
|  HTTP API:     http://{host}:{port}/api/v1/
|  API docs:     http://{host}:{port}/docs
|  Health check: http://{host}:{port}/health
+--------------------------------------------------------------+
    """
    print(banner)


def run_server(
    host: str = None,
    port: int = None,
    reload: bool = True,
    workers: int = 1,
    debug: bool = False
):
    """
    Start the server

    Args:
        host: Listen address
        port: Listen port
        reload: Hot reload (development mode)
        workers: Worker processes (production mode)
        debug: Verbose logging
    """
    import uvicorn
    from table_browser.core.config import get_settings
    from table_browser.core.logging import setup_logging

    settings = get_settings()

    host = host or settings.SERVER_HOST
    port = port or settings.SERVER_PORT
    debug = debug or settings.DEBUG_MODE

    setup_logging(debug)
    print_banner(host, port)

    # Pre-flight check
    print("Checking dependencies...")
    try:
        from table_browser.core.database import close_database
        from table_browser.core.health import check_mysql
        import asyncio

        async def quick_check():
            try:
                return {"MySQL": await check_mysql()}
            finally:
                # The pool belongs to this event loop, the server builds its own
                await close_database()

        results = asyncio.run(quick_check())

        for name, status in results.items():
            mark = "ok" if str(status).startswith("connected") else "!!"
            print(f"   [{mark}] {name}: {status}")

        print()
    except Exception as e:
        print(f"   [!!] Health check failed: {e}")
        print("   (the server still starts, requests will fail until the store is reachable)")
        print()

    print(f"Starting server @ http://{host}:{port}")
    print("   Press Ctrl+C to stop\n")

    uvicorn.run(
        "table_browser.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,  # reload only supports one process
        log_level="debug" if debug else "info",
        access_log=debug
    )


def main():
    parser = argparse.ArgumentParser(
        description="Table Browser backend launcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                    # development mode (hot reload)
  python run.py --prod             # production mode (multiple workers)
  python run.py --host 0.0.0.0     # listen address
  python run.py --port 8000        # port
  python run.py --debug            # verbose logging
        """
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Listen address (default from .env)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port (default from .env)"
    )
    parser.add_argument(
        "--prod",
        action="store_true",
        help="Production mode (no hot reload, multiple workers)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Worker processes (production mode only, default 4)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode (verbose logs)"
    )

    args = parser.parse_args()

    run_server(
        host=args.host,
        port=args.port,
        reload=not args.prod,
        workers=args.workers,
        debug=args.debug
    )


if __name__ == "__main__":
    main()
