"""
IAM service

Serves users, roles and permissions to the other services over RPC message
patterns. Business failures are raised through the service's ErrorResolver
(``IAM_SERVICE.*``) and leave the process as RPC failure replies.
"""

from dotenv import load_dotenv
load_dotenv()

from typing import Optional

from fastapi import FastAPI

from shared.config.settings import get_settings
from shared.errors.catalog import load_error_catalog
from shared.errors.error_codes import IamServiceErrorCodes, codes_of
from shared.rpc.server import RpcRouter
from shared.security.passwords import PasswordHasher
from shared.services.service_factory import IAM_SERVICE_INFO, create_fastapi_service, run_service

from iam_service.handlers import IamHandlers
from iam_service.repository import InMemoryUserRepository, seed_users


def create_app(repository: Optional[InMemoryUserRepository] = None) -> FastAPI:
    catalog = load_error_catalog(IAM_SERVICE_INFO.name, get_settings().errors.error_catalog_dir)
    app = create_fastapi_service(
        IAM_SERVICE_INFO,
        catalog,
        required_codes=codes_of(IamServiceErrorCodes),
    )

    if repository is None:
        repository = seed_users(InMemoryUserRepository(), PasswordHasher().hash)
    app.state.repository = repository

    router = IamHandlers(repository, app.state.error_resolver).register(RpcRouter(IAM_SERVICE_INFO.name))
    router.install(app, app.state.exception_filter)
    return app


app = create_app()


if __name__ == "__main__":
    run_service(IAM_SERVICE_INFO, "iam_service.main:app")
