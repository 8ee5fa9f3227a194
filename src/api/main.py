"""FastAPI application entry point."""

import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# main.py is at src/api/main.py; make src importable when run directly
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

import config  # noqa: E402  loads .env before anything reads the environment
from api.routes import auth, health  # noqa: E402
from utils.logging import setup_structured_logging  # noqa: E402
from adapter.mongodb.connection import get_mongodb_client  # noqa: E402
from adapter.mongodb.user_repository import MongoUserRepository  # noqa: E402

setup_structured_logging(config.LOG_LEVEL)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Personal Productivity Dashboard API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    if config.USER_STORE == "mongodb":
        client = get_mongodb_client()
        if client:
            if MongoUserRepository(client[config.DATABASE_NAME]).ensure_indexes():
                logger.info("MongoDB indexes verified/created successfully")
            else:
                logger.warning("Failed to create some MongoDB indexes")
        else:
            logger.warning("MongoDB unavailable, skipping index creation")
    else:
        logger.warning("Using in-memory user store; accounts are lost on restart")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Authentication and profile API for the personal productivity dashboard",
    version=VERSION,
    lifespan=lifespan,
)

# With a wildcard origin browsers refuse credentialed requests, so only
# enable credentials for an explicit origin list.
if config.CORS_ORIGINS == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in config.CORS_ORIGINS.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {success: false, message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body", extra={"path": request.url.path, "errorCount": len(exc.errors())})
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request body"},
    )


app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    # Application logs go through structured logging; uvicorn's access log would duplicate them
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=config.PORT,
        access_log=False
    )
