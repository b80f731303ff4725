"""
FastAPI application entry point with health check route.
"""
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from repairdesk.api.routes import (
    admin_service_requests,
    admin_users,
    me,
    service_requests,
    site_content,
)
from repairdesk.api.middleware.error_handler import (
    AppException,
    app_exception_handler,
    configuration_exception_handler,
    field_validation_exception_handler,
    remote_operation_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)
from repairdesk.lib.errors import ConfigurationError, FieldValidationError, RemoteOperationError
from repairdesk.lib.logging import get_logger, set_correlation_id
from repairdesk.lib.settings import settings
from repairdesk.services.container import Services, build_services_from_url

logger = get_logger(__name__)


# Correlation ID middleware
class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add correlation_id to all requests for distributed tracing.
    Accepts X-Correlation-ID from incoming requests or generates a new one.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))

        # Store in request state for access in route handlers and error handlers
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        logger.info(
            "Incoming request",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None,
            }
        )

        response = await call_next(request)

        response.headers["X-Correlation-ID"] = correlation_id

        logger.info(
            "Response sent",
            extra={
                "correlation_id": correlation_id,
                "status_code": response.status_code,
            }
        )

        return response


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build the application.

    Args:
        services: Pre-built services (tests). When omitted they are built from
            `settings.database_url` at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owns_services = services is None
        if owns_services:
            app.state.services = build_services_from_url(settings.database_url, echo=settings.debug)
        app.state.services.start()
        logger.info(f"{settings.app_name} starting up...")
        yield
        logger.info(f"{settings.app_name} shutting down...")
        if owns_services:
            app.state.services.close()
        else:
            app.state.services.stop()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description="Service request intake, status lookup and admin back office for Satisfied Computers",
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(FieldValidationError, field_validation_exception_handler)
    app.add_exception_handler(ConfigurationError, configuration_exception_handler)
    app.add_exception_handler(RemoteOperationError, remote_operation_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include routers
    app.include_router(service_requests.router)
    app.include_router(me.router)
    app.include_router(site_content.router)
    app.include_router(admin_service_requests.router)
    app.include_router(admin_users.router)
    app.include_router(site_content.admin_router)

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint."""
        current: Optional[Services] = getattr(request.app.state, "services", None)
        return {
            "status": "ok",
            "document_store": "configured" if current is not None and current.configured else "not_configured",
        }

    return app


app = create_app()
