"""
Auth service

Authenticates users stored in the IAM service and issues JWT access and
refresh tokens. IAM failures are reconciled by the IAM client and either
mapped to ``AUTH_SERVICE.*`` codes or propagated as they are.
"""

from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from shared.config.settings import get_settings
from shared.errors.catalog import load_error_catalog
from shared.errors.error_codes import AuthServiceErrorCodes, codes_of
from shared.rpc.server import RpcRouter
from shared.security.passwords import PasswordHasher
from shared.security.tokens import TokenService
from shared.services.service_factory import AUTH_SERVICE_INFO, IAM_SERVICE_INFO, create_fastapi_service, run_service
from shared.utils.app_logger import get_service_logger

from auth_service.handlers import AuthHandlers
from auth_service.iam_client import IamClient
from auth_service.token_store import InMemoryRefreshTokenStore

logger = get_service_logger(AUTH_SERVICE_INFO.name, "lifecycle")


def create_app(iam_transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{AUTH_SERVICE_INFO.name} service starting")
        yield
        await app.state.iam_client.close()
        logger.info(f"{AUTH_SERVICE_INFO.name} service stopped")

    catalog = load_error_catalog(AUTH_SERVICE_INFO.name, settings.errors.error_catalog_dir)
    app = create_fastapi_service(
        AUTH_SERVICE_INFO,
        catalog,
        required_codes=codes_of(AuthServiceErrorCodes),
        custom_lifespan=lifespan,
    )

    iam_client = IamClient(
        settings.services.iam_base_url,
        service_name=IAM_SERVICE_INFO.name,
        transport=iam_transport,
        resolver=app.state.error_resolver,
    )
    app.state.iam_client = iam_client
    app.state.token_service = TokenService.from_settings(settings)

    handlers = AuthHandlers(
        iam=iam_client,
        resolver=app.state.error_resolver,
        tokens=app.state.token_service,
        hasher=PasswordHasher(),
        refresh_tokens=InMemoryRefreshTokenStore(),
    )
    handlers.register_patterns(RpcRouter(AUTH_SERVICE_INFO.name)).install(app, app.state.exception_filter)
    return app


app = create_app()


if __name__ == "__main__":
    run_service(AUTH_SERVICE_INFO, "auth_service.main:app")
