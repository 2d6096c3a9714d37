"""
Service Factory Module

Common FastAPI service creation for the gateway and every backend service:
error catalog + resolver, exception filter, request language, request
logging and health endpoints.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Iterable, List, Optional

import uvicorn
from fastapi import FastAPI, Request

from shared.config.settings import get_settings
from shared.errors.catalog import ErrorCatalog, verify_catalog_codes
from shared.errors.resolver import ErrorResolver
from shared.i18n.middleware import install_i18n_middleware
from shared.middleware.error_handler import install_exception_filter
from shared.utils.app_logger import configure_logging, get_logger

logger = get_logger(__name__)


class ServiceInfo:
    """Service configuration container"""

    def __init__(
        self,
        name: str,
        title: str,
        description: str,
        version: str = "1.0.0",
        port: int = 8000,
        host: str = "localhost",
        tags: Optional[List[Dict[str, str]]] = None
    ):
        self.name = name
        self.title = title
        self.description = description
        self.version = version
        self.port = port
        self.host = host
        self.tags = tags or []


def create_fastapi_service(
    service_info: ServiceInfo,
    error_catalog: ErrorCatalog,
    required_codes: Iterable[str] = (),
    validation_code: Optional[str] = None,
    custom_lifespan: Optional[Callable] = None,
    include_health_check: bool = True,
    include_logging_middleware: bool = True,
) -> FastAPI:
    """
    Create a standardized FastAPI application with common configurations.

    Args:
        service_info: Service configuration
        error_catalog: Catalog backing the application's ErrorResolver
        required_codes: Codes the service raises; startup fails if one is missing
        validation_code: Code attached to request validation failures
        custom_lifespan: Optional custom lifespan function
        include_health_check: Whether to include default health check endpoint
        include_logging_middleware: Whether to include request logging middleware

    Returns:
        Configured FastAPI application
    """
    configure_logging(get_settings().log_level)
    verify_catalog_codes(error_catalog, required_codes)

    if custom_lifespan:
        lifespan_func = custom_lifespan
    else:
        @asynccontextmanager
        async def default_lifespan(app: FastAPI):
            logger.info(f"{service_info.name} service starting")
            yield
            logger.info(f"{service_info.name} service stopped")
        lifespan_func = default_lifespan

    openapi_tags = [
        {"name": "Health", "description": "Health check and service status"}
    ]
    openapi_tags.extend(service_info.tags)

    app = FastAPI(
        title=service_info.title,
        description=service_info.description,
        version=service_info.version,
        lifespan=lifespan_func,
        openapi_tags=openapi_tags
    )

    app.state.service_info = service_info
    app.state.error_catalog = error_catalog
    app.state.error_resolver = ErrorResolver(error_catalog)

    # Added first so that it sits innermost, under logging and language.
    install_exception_filter(app, service_name=service_info.name, validation_code=validation_code)

    if include_logging_middleware:
        _add_logging_middleware(app)

    install_i18n_middleware(app)

    if include_health_check:
        _add_health_check(app, service_info)

    logger.info(f"{service_info.name} FastAPI app created")

    return app


def _add_logging_middleware(app: FastAPI) -> None:
    """Add request logging middleware"""
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            f'Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.4f}s'
        )
        return response


def _add_health_check(app: FastAPI, service_info: ServiceInfo) -> None:
    """Add standardized health check endpoints"""

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "service": service_info.name,
            "title": service_info.title,
            "version": service_info.version,
            "description": service_info.description,
            "status": "running"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        catalog: ErrorCatalog = app.state.error_catalog
        return {
            "status": "healthy",
            "service": service_info.name,
            "version": service_info.version,
            "errorCatalog": {"version": catalog.version, "codes": len(catalog)},
        }


def create_uvicorn_config(service_info: ServiceInfo, reload: bool = False) -> Dict[str, Any]:
    """
    Create standardized uvicorn configuration.

    Args:
        service_info: Service configuration
        reload: Enable auto-reload for development

    Returns:
        Uvicorn configuration dictionary
    """
    return {
        "host": service_info.host,
        "port": service_info.port,
        "reload": reload,
        "log_config": _get_logging_config(service_info.name),
    }


def _get_logging_config(service_name: str) -> Dict[str, Any]:
    """Get standardized logging configuration for uvicorn"""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s %(asctime)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(levelprefix)s %(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s',
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
            "access": {
                "formatter": "access",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"level": "INFO"},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            service_name.lower(): {"handlers": ["default"], "level": "INFO", "propagate": False},
        },
    }


def run_service(
    service_info: ServiceInfo,
    app_module_path: str,
    reload: bool = False
) -> None:
    """
    Run the service with standardized uvicorn configuration.

    Args:
        service_info: Service configuration
        app_module_path: Module path for uvicorn (e.g., "iam_service.main:app")
        reload: Enable auto-reload for development
    """
    config = create_uvicorn_config(service_info, reload)
    uvicorn.run(app_module_path, **config)


_services = get_settings().services

API_GATEWAY_SERVICE_INFO = ServiceInfo(
    name="api-gateway",
    title="API Gateway",
    description="Public HTTP edge for the auth, IAM and catalog services",
    port=_services.gateway_port,
    host=_services.gateway_host,
    tags=[
        {"name": "Auth", "description": "Login, registration and tokens"},
        {"name": "IAM", "description": "Users and role assignments"},
        {"name": "Catalog", "description": "Products"},
    ],
)

AUTH_SERVICE_INFO = ServiceInfo(
    name="auth-service",
    title="Auth Service",
    description="Authentication: login, registration, token refresh and logout",
    port=_services.auth_port,
    host=_services.auth_host,
)

IAM_SERVICE_INFO = ServiceInfo(
    name="iam-service",
    title="IAM Service",
    description="Identity and access management: users, roles and permissions",
    port=_services.iam_port,
    host=_services.iam_host,
)

CATALOG_SERVICE_INFO = ServiceInfo(
    name="catalog-service",
    title="Catalog Service",
    description="Product catalog",
    port=_services.catalog_port,
    host=_services.catalog_host,
)
