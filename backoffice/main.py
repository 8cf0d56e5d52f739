import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv

# Load environment variables as early as possible
load_dotenv()

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.middleware.gzip import GZipMiddleware

from .core.config import Settings, get_settings, settings as default_settings
from .database import create_db_and_tables
from .dependencies import build_notification_sender, build_rate_limiter
from .exceptions import http_exception_handler, validation_exception_handler, integrity_error_handler
from .infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import build_password_context
from .middleware import (
    RateLimitMiddleware, SecurityMiddleware, LoggingMiddleware,
    ErrorHandlingMiddleware, RequestSizeLimitMiddleware,
)
from .routers import (
    auth_router, tracks_router, courses_router,
    learners_router, invoices_router, dashboard_router,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL.upper(), logging.INFO),
    format=default_settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {app.title}...")
    app.state.db_init_ok = True
    app.state.db_init_error = None
    try:
        create_db_and_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        # Do not crash the app; report via health endpoint
        app.state.db_init_ok = False
        app.state.db_init_error = str(e)
        logger.exception("Database initialization failed")
    yield
    # Shutdown
    logger.info(f"Shutting down {app.title}...")


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or default_settings

    if not settings.secret_key_configured:
        logger.warning("JWT_SECRET_KEY is not set; logins and protected routes will be refused")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
    )

    # Process-wide collaborators shared by every request
    app.state.notification_sender = build_notification_sender(settings)
    app.state.otp_rate_limiter = build_rate_limiter(settings)
    app.state.pwd_context = build_password_context(settings.BCRYPT_ROUNDS)
    app.dependency_overrides[get_settings] = lambda: settings

    # Add custom exception handlers
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)

    # Add middleware
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)
    app.add_middleware(RateLimitMiddleware, rate_limit=settings.RATE_LIMIT_PER_MINUTE)

    # GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.allowed_methods_list,
        allow_headers=settings.allowed_headers_list,
    )

    for module in (auth_router, tracks_router, courses_router, learners_router, invoices_router, dashboard_router):
        app.include_router(module.router, prefix=settings.API_PREFIX)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "healthy" if getattr(app.state, "db_init_ok", True) else "degraded",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": {
                "ok": getattr(app.state, "db_init_ok", True),
                "error": getattr(app.state, "db_init_error", None)
            },
            "auth": {
                "secret_key_configured": settings.secret_key_configured,
                "jwt_algorithm": settings.ALGORITHM,
                "token_expiry_days": settings.ACCESS_TOKEN_EXPIRE_DAYS
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backoffice.main:app", host=default_settings.HOST, port=default_settings.PORT, reload=default_settings.DEBUG)
