"""
Catalog service
"""

from dotenv import load_dotenv
load_dotenv()

from typing import Optional

from fastapi import FastAPI

from shared.config.settings import get_settings
from shared.errors.catalog import load_error_catalog
from shared.errors.error_codes import CatalogServiceErrorCodes, codes_of
from shared.rpc.server import RpcRouter
from shared.services.service_factory import CATALOG_SERVICE_INFO, create_fastapi_service, run_service

from catalog_service.handlers import CatalogHandlers
from catalog_service.repository import InMemoryProductRepository


def create_app(repository: Optional[InMemoryProductRepository] = None) -> FastAPI:
    catalog = load_error_catalog(CATALOG_SERVICE_INFO.name, get_settings().errors.error_catalog_dir)
    app = create_fastapi_service(
        CATALOG_SERVICE_INFO,
        catalog,
        required_codes=codes_of(CatalogServiceErrorCodes),
    )

    repository = repository or InMemoryProductRepository()
    app.state.repository = repository

    router = CatalogHandlers(repository, app.state.error_resolver).register(RpcRouter(CATALOG_SERVICE_INFO.name))
    router.install(app, app.state.exception_filter)
    return app


app = create_app()


if __name__ == "__main__":
    run_service(CATALOG_SERVICE_INFO, "catalog_service.main:app")
