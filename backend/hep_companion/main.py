# hep_companion/main.py
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from hep_companion.core import AppError
from hep_companion.core.config import settings
from hep_companion.core.exception_handlers import (
    app_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from hep_companion.core.logging_config import configure_logging
from hep_companion.middleware.request_logging import RequestLoggingMiddleware
from hep_companion.middleware.security_headers import SecurityHeadersMiddleware
from hep_companion.routers.auth import router as auth_router
from hep_companion.routers.exercises import router as exercises_router
from hep_companion.routers.feedback import router as feedback_router
from hep_companion.routers.generate import router as generate_router
from hep_companion.routers.health import router as health_router
from hep_companion.routers.organizations import router as organizations_router

configure_logging()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # ---- CORS (env-driven) ----
    # CORS_ALLOW_ORIGINS="http://localhost:3000,https://hep.example.com"
    # Session cookies are sent, so never "*"; default to the site itself.
    allow_origins = _split_csv(settings.CORS_ALLOW_ORIGINS) or [settings.SITE_URL]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(generate_router)
    app.include_router(feedback_router)
    app.include_router(exercises_router)
    app.include_router(organizations_router)

    return app


app = create_app()
