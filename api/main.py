"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from api.routes import billboards, health, locations
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import dispose_engine
from core.exceptions import ConfigurationError, QueryValidationError
from core.logging import setup_logging
from schemas.api import ErrorResponse
import logging

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Billboard Inventory API",
    description="Read-only query API over normalized billboard inventory",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)


# Include routers
app.include_router(health.router)
app.include_router(billboards.router)
app.include_router(locations.router)


@app.exception_handler(QueryValidationError)
async def query_validation_handler(request: Request, exc: QueryValidationError):
    value = exc.context.get("value")
    detail = f"{exc.context.get('parameter')}={value}" if "parameter" in exc.context else None
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=exc.message, detail=detail).model_dump(mode="json")
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=str(exc)).model_dump(mode="json")
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=exc.message).model_dump(mode="json")
    )


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Billboard Inventory API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    if settings.DATABASE_URL:
        logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")
    else:
        logger.warning("DATABASE_URL is not set; queries will fail")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Billboard Inventory API")
    await dispose_engine()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Billboard Inventory API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "billboards": "/billboards",
            "zipcodes": "/zipcodes",
            "states": "/states",
            "cities": "/cities"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
