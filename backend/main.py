"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import auth, contacts, health, metrics
from app.core.config import get_settings
from app.core.database import init_db
from app.core.errors import ContactBookError
from app.core.logging_config import LoggingConfig
from app.core.metrics import set_app_info
from app.core.middleware import LoggingContextMiddleware
from app.core.middleware_metrics import MetricsMiddleware
from app.core.security import TokenService

APP_VERSION = "0.1.0"

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    if settings.database_auto_create:
        init_db()

    yield

    logger.info(f"Shutting down {settings.app_name}...")


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def create_app() -> FastAPI:
    """Build the application; fails fast when settings are unusable"""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Personal contact book with token-authenticated, per-user contact lists",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    # Built once; request handlers reach it through app.state
    application.state.token_service = TokenService(
        secret=settings.jwt_secret,
        lifetime=timedelta(hours=settings.token_lifetime_hours),
        algorithm=settings.jwt_algorithm,
    )
    set_app_info(settings.app_name, settings.app_env, APP_VERSION)

    application.add_middleware(LoggingContextMiddleware)
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(ContactBookError)
    async def contact_book_error_handler(request: Request, exc: ContactBookError):
        if exc.status_code >= 500:
            logger.error(f"Request failed: {exc.message}", exc_info=exc.__cause__ or exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log unhandled errors; the client only sees a generic message"""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
                "path": request.url.path,
                "method": request.method,
            }
        )
        return JSONResponse(status_code=500, content={"message": "An error occurred"})

    application.include_router(health.router)
    application.include_router(metrics.router)
    application.include_router(auth.router)
    application.include_router(contacts.router)

    @application.get("/api")
    async def root():
        """Root API endpoint"""
        return {
            "name": settings.app_name,
            "version": APP_VERSION,
            "status": "running",
            "environment": settings.app_env,
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
