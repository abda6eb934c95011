import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.config import ShopConfig
from app.db.db import Base, engine
from app.routes import (
    estimates_router,
    loyalty_router,
    portal_router,
    public_router,
)

logging.basicConfig(
    level=ShopConfig.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler - runs on startup and shutdown"""
    # Startup
    Base.metadata.create_all(bind=engine)
    yield
    # Shutdown


app = FastAPI(
    title="Garage Ledger API",
    version="0.1.0",
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# CORS middleware - MUST be added first before other middlewares
app.add_middleware(
    CORSMiddleware,
    allow_origins=ShopConfig.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):  # type: ignore[override]
    """Handle validation errors with HTTP 400 to keep one error contract."""
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request payload.",
                "details": {"errors": jsonable_errors(exc)}
            }
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):  # type: ignore[override]
    """Handle general exceptions - log and return 500 error"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "Internal server error.",
                "details": {}
            }
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold the raw ValueError raised by a validator
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


# Register routers
app.include_router(estimates_router)
app.include_router(loyalty_router)
app.include_router(portal_router)
app.include_router(public_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
