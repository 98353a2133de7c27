"""
BrainSort Backend - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
import logging

from . import __version__
from .config import settings
from .database import database
from .dependencies import LoginRedirect
from .exceptions import BrainSortError
from .services.encryption import init_encryption
from .routes import (
    auth_router,
    clarity_router,
    checklists_router,
    views_router,
    brain_router,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting BrainSort Backend...")

    await database.connect()

    if database.is_connected():
        logger.info("Database connected successfully")
    else:
        logger.warning("Database connection failed - running in degraded mode")
        logger.warning("Requests needing storage will answer 503")

    init_encryption(settings.encryption_key)
    logger.info("Encryption initialized")

    logger.info(f"LLM Base URL: {settings.openai_base_url}, model: {settings.openai_model}")
    logger.info(f"LLM API Key configured: {'Yes' if settings.openai_api_key else 'No'}")

    yield

    logger.info("Shutting down BrainSort Backend...")
    await database.disconnect()


app = FastAPI(
    title="BrainSort API",
    description="Turns messy thoughts into a persisted, actionable checklist",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.allowed_origins.split(",") if settings.allowed_origins != "*" else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api")
app.include_router(clarity_router, prefix="/api")
app.include_router(checklists_router, prefix="/api")
app.include_router(views_router)
app.include_router(brain_router)


@app.exception_handler(BrainSortError)
async def brainsort_error_handler(request: Request, exc: BrainSortError):
    """Convert domain errors into {error, details} responses"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.user_message, "details": str(exc)},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies get the same {error, details} shape"""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"Invalid request on {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request.", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "details": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(LoginRedirect)
async def login_redirect_handler(request: Request, exc: LoginRedirect):
    return RedirectResponse(exc.location, status_code=303)


@app.get("/")
async def root():
    return {"message": "BrainSort API", "version": __version__}


@app.get("/health")
async def health_check():
    """Health check endpoint with database status"""
    db_connected = await database.check_connection()

    return {
        "status": "healthy" if db_connected else "degraded",
        "database": "connected" if db_connected else "disconnected",
        "version": __version__
    }


@app.get("/api")
async def api_root():
    return {"message": "BrainSort API", "status": "running"}
