import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, InterfaceError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from table_browser.api.v1 import tables
from table_browser.core.config import get_settings
from table_browser.core.database import close_database
from table_browser.core.exceptions import (
    CatalogError,
    InvalidRequestError,
    TableBrowserError,
    UnknownTierOrderingError,
    ValidationError,
)
from table_browser.core.health import check_mysql
from table_browser.schemas.response import ResponseCode, error

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_database()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Routers
app.include_router(tables.router, prefix=f"{settings.API_V1_STR}")


# =============================================================================
# Error mapping
# =============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content=error(ResponseCode.VALIDATION_ERROR, exc.message, data={"errors": exc.messages})
    )


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return JSONResponse(status_code=400, content=error(ResponseCode.PARAM_ERROR, exc.message))


@app.exception_handler(TableBrowserError)
async def table_browser_error_handler(request: Request, exc: TableBrowserError):
    # Catalog inconsistencies and any other engine error point at the schema
    if isinstance(exc, (CatalogError, UnknownTierOrderingError)):
        logger.error(f"[API] Schema error on {request.url.path}: {exc}")
        code = ResponseCode.SCHEMA_ERROR
    else:
        logger.error(f"[API] Engine error on {request.url.path}: {exc}")
        code = ResponseCode.INTERNAL_ERROR
    return JSONResponse(
        status_code=500,
        content=error(code, exc.message, data={"error_code": exc.code.value})
    )


def is_connection_error(exc: SQLAlchemyError) -> bool:
    """Driver interface failures, pool exhaustion and dropped connections"""
    if isinstance(exc, (InterfaceError, PoolTimeoutError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # The store's own message is returned unmodified
    message = str(getattr(exc, "orig", None) or exc)
    if is_connection_error(exc):
        logger.error(f"[API] Store unreachable on {request.url.path}: {message}")
        return JSONResponse(status_code=503, content=error(ResponseCode.DB_CONNECTION_ERROR, message))

    logger.error(f"[API] Database error on {request.url.path}: {message}")
    return JSONResponse(status_code=500, content=error(ResponseCode.DB_ERROR, message))


@app.get("/health")
async def health_check():
    """
    Health check endpoint to verify service status and dependencies.
    """
    results = {
        "mysql": await check_mysql(),
    }

    overall_status = "ok"
    if any(str(v).startswith("failed") for v in results.values()):
        overall_status = "degraded"

    return {
        "status": overall_status,
        "version": settings.VERSION,
        "dependencies": results
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT
    )
