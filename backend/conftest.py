"""
Fixtures shared by the unit tests and the per-service tests
"""

from __future__ import annotations

from typing import Any, Dict

import httpx
import pytest

from shared.errors.catalog import ErrorCatalog, load_error_catalog
from shared.errors.resolver import ErrorResolver
from shared.security.passwords import PasswordHasher


def catalog_document(errors: Dict[str, Dict[str, Any]], **overrides) -> Dict[str, Any]:
    document = {
        "version": "test",
        "languages": ["en", "vi"],
        "defaultLanguage": "en",
        "errors": errors,
    }
    document.update(overrides)
    return document


@pytest.fixture
def make_catalog():
    def _make(errors: Dict[str, Dict[str, Any]], service_name: str = "test-service", **overrides) -> ErrorCatalog:
        return ErrorCatalog.from_dict(service_name, catalog_document(errors, **overrides))

    return _make


@pytest.fixture(scope="session")
def iam_catalog() -> ErrorCatalog:
    return load_error_catalog("iam-service")


@pytest.fixture(scope="session")
def auth_catalog() -> ErrorCatalog:
    return load_error_catalog("auth-service")


@pytest.fixture(scope="session")
def edge_catalog() -> ErrorCatalog:
    from api_gateway.main import load_edge_catalog

    return load_edge_catalog()


@pytest.fixture
def edge_resolver(edge_catalog) -> ErrorResolver:
    return ErrorResolver(edge_catalog)


@pytest.fixture(scope="session")
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def iam_app(password_hasher):
    from iam_service.main import create_app
    from iam_service.repository import InMemoryUserRepository, seed_users

    return create_app(repository=seed_users(InMemoryUserRepository(), password_hasher.hash))


@pytest.fixture
def auth_app(iam_app):
    from auth_service.main import create_app

    return create_app(iam_transport=httpx.ASGITransport(app=iam_app))


@pytest.fixture
def catalog_app():
    from catalog_service.main import create_app

    return create_app()


@pytest.fixture
def gateway_app(auth_app, iam_app, catalog_app):
    """Gateway wired to in-process auth, IAM and catalog services."""
    from api_gateway.main import create_app

    return create_app(
        auth_transport=httpx.ASGITransport(app=auth_app),
        iam_transport=httpx.ASGITransport(app=iam_app),
        catalog_transport=httpx.ASGITransport(app=catalog_app),
    )
