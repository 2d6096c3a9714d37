"""
API gateway

Public HTTP edge. Every route forwards to a backend service over RPC;
remote business failures come back as reconciled DomainExceptions and are
rendered by the gateway's exception filter with their original status,
code, message and metadata.

The gateway's resolver is built over the edge catalog: its own codes plus
the auth, IAM and catalog codes, so guard failures and reconciled remote
errors resolve locally.
"""

from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from shared.config.settings import get_settings
from shared.errors.catalog import ErrorCatalog, load_error_catalog
from shared.errors.error_codes import (
    ApiGatewayErrorCodes,
    AuthServiceErrorCodes,
    IamServiceErrorCodes,
    codes_of,
)
from shared.rpc.client import RpcClient
from shared.security.tokens import TokenService
from shared.services.service_factory import (
    API_GATEWAY_SERVICE_INFO,
    AUTH_SERVICE_INFO,
    CATALOG_SERVICE_INFO,
    IAM_SERVICE_INFO,
    create_fastapi_service,
    run_service,
)
from shared.utils.app_logger import get_service_logger

from api_gateway.routers import auth, catalog, iam

logger = get_service_logger(API_GATEWAY_SERVICE_INFO.name, "lifecycle")


def load_edge_catalog(catalog_dir: Optional[str] = None) -> ErrorCatalog:
    return ErrorCatalog.combine(
        [
            load_error_catalog(API_GATEWAY_SERVICE_INFO.name, catalog_dir),
            load_error_catalog(AUTH_SERVICE_INFO.name, catalog_dir),
            load_error_catalog(IAM_SERVICE_INFO.name, catalog_dir),
            load_error_catalog(CATALOG_SERVICE_INFO.name, catalog_dir),
        ],
        service_name=API_GATEWAY_SERVICE_INFO.name,
    )


def create_app(
    auth_transport: Optional[httpx.AsyncBaseTransport] = None,
    iam_transport: Optional[httpx.AsyncBaseTransport] = None,
    catalog_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{API_GATEWAY_SERVICE_INFO.name} service starting")
        yield
        for client in (app.state.auth_client, app.state.iam_client, app.state.catalog_client):
            await client.close()
        logger.info(f"{API_GATEWAY_SERVICE_INFO.name} service stopped")

    app = create_fastapi_service(
        API_GATEWAY_SERVICE_INFO,
        load_edge_catalog(settings.errors.error_catalog_dir),
        required_codes=codes_of(ApiGatewayErrorCodes) + codes_of(AuthServiceErrorCodes) + codes_of(IamServiceErrorCodes),
        validation_code=ApiGatewayErrorCodes.VALIDATION_FAILED,
        custom_lifespan=lifespan,
    )

    resolver = app.state.error_resolver
    app.state.token_service = TokenService.from_settings(settings)
    app.state.auth_client = RpcClient(
        settings.services.auth_base_url,
        service_name=AUTH_SERVICE_INFO.name,
        transport=auth_transport,
        resolver=resolver,
    )
    app.state.iam_client = RpcClient(
        settings.services.iam_base_url,
        service_name=IAM_SERVICE_INFO.name,
        transport=iam_transport,
        resolver=resolver,
    )
    app.state.catalog_client = RpcClient(
        settings.services.catalog_base_url,
        service_name=CATALOG_SERVICE_INFO.name,
        transport=catalog_transport,
        resolver=resolver,
    )

    app.include_router(auth.router)
    app.include_router(iam.router)
    app.include_router(catalog.router)
    return app


app = create_app()


if __name__ == "__main__":
    run_service(API_GATEWAY_SERVICE_INFO, "api_gateway.main:app")
