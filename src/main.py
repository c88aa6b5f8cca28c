"""
QuickJob - Main Application Entry Point

Marketplace backend: accounts, identity verification, credentials,
conversations, notifications, booking requests, profiles and ratings.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from src.config import settings
from src.database import init_db, close_db
from src.errors import QuickJobError
from src.mailer import Mailer
from src.rate_limit import RateLimitMiddleware
from src.routes.auth_routes import router as auth_router
from src.routes.credential_routes import router as credential_router
from src.routes.verification_routes import router as verification_router
from src.routes.conversation_routes import router as conversation_router
from src.routes.message_routes import router as message_router
from src.routes.notification_routes import router as notification_router
from src.routes.request_routes import router as request_router
from src.routes.profile_routes import router as profile_router
from src.routes.rating_routes import router as rating_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release connections on shutdown."""
    await init_db()
    logger.info("%s %s starting on %s:%s", settings.APP_NAME, settings.APP_VERSION, settings.HOST, settings.PORT)
    yield
    await close_db()
    logger.info("%s shutting down", settings.APP_NAME)


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Mail configuration is resolved once and injected where needed
app.state.mailer = Mailer.from_settings(settings)

# Serve uploaded files
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Add rate limiting middleware
app.add_middleware(RateLimitMiddleware)

# Include routers
app.include_router(auth_router)
app.include_router(credential_router)
app.include_router(verification_router)
app.include_router(conversation_router)
app.include_router(message_router)
app.include_router(notification_router)
app.include_router(request_router)
app.include_router(profile_router)
app.include_router(rating_router)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(QuickJobError)
async def quickjob_error_handler(request: Request, exc: QuickJobError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Invalid request",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# =============================================================================
# ROUTES
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


# =============================================================================
# RUN (for development)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
