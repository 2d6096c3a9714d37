"""
JWT and role/permission guards
"""

from datetime import timedelta

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from shared.errors.resolver import ErrorResolver
from shared.i18n.middleware import install_i18n_middleware
from shared.middleware.error_handler import install_exception_filter
from shared.security.auth_utils import extract_bearer_token, has_all_permissions, has_any_role
from shared.security.guards import AuthenticatedUser, get_current_user, require_permissions, require_roles
from shared.security.tokens import TokenService


@pytest.fixture
def tokens():
    return TokenService(secret_key="guard-access", refresh_secret_key="guard-refresh")


@pytest.fixture
def client(edge_catalog, tokens):
    app = FastAPI()
    app.state.error_resolver = ErrorResolver(edge_catalog)
    app.state.token_service = tokens
    install_exception_filter(app, service_name="guarded")
    install_i18n_middleware(app)

    @app.get("/me")
    async def me(user: AuthenticatedUser = Depends(get_current_user)):
        return {"id": user.id, "roles": user.roles}

    @app.get("/admin", dependencies=[Depends(require_roles("ADMIN"))])
    async def admin():
        return {"ok": True}

    @app.post("/products", dependencies=[Depends(require_permissions("catalog:write"))])
    async def create_product():
        return {"ok": True}

    return TestClient(app)


def _bearer(tokens, **kwargs):
    return {"Authorization": f"Bearer {tokens.issue_access_token('user-1', **kwargs)}"}


class TestCurrentUser:
    def test_valid_token(self, client, tokens):
        response = client.get("/me", headers=_bearer(tokens, roles=["USER"]))

        assert response.status_code == 200
        assert response.json() == {"id": "user-1", "roles": ["USER"]}

    def test_missing_token(self, client):
        response = client.get("/me")

        assert response.status_code == 401
        body = response.json()
        assert body["code"] == "AUTH_SERVICE.0006"
        assert body["message"] == "Invalid token"
        assert body["metadata"] == {"info": "Missing bearer token"}

    def test_malformed_token(self, client):
        response = client.get("/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_SERVICE.0006"
        assert "info" in response.json()["metadata"]

    def test_non_bearer_scheme(self, client):
        response = client.get("/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.json()["code"] == "AUTH_SERVICE.0006"

    def test_expired_token(self, client, tokens):
        response = client.get("/me", headers=_bearer(tokens, expires_delta=timedelta(seconds=-5)))

        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_SERVICE.0007"
        assert response.json()["message"] == "Token has expired"


class TestRoleAndPermissionGuards:
    def test_missing_role(self, client, tokens):
        response = client.get("/admin", headers=_bearer(tokens, roles=["USER"]))

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "IAM_SERVICE.0600"
        assert body["message"] == "Insufficient permissions"
        assert body["metadata"] == {"requiredRoles": ["ADMIN"]}

    def test_role_present(self, client, tokens):
        response = client.get("/admin", headers=_bearer(tokens, roles=["USER", "ADMIN"]))

        assert response.status_code == 200

    def test_guard_without_token_fails_on_authentication_first(self, client):
        assert client.get("/admin").json()["code"] == "AUTH_SERVICE.0006"

    def test_missing_permission(self, client, tokens):
        response = client.post("/products", headers=_bearer(tokens, permissions=["catalog:read"]))

        assert response.status_code == 403
        assert response.json()["metadata"] == {"requiredPermissions": ["catalog:write"]}

    def test_wildcard_permission(self, client, tokens):
        response = client.post("/products", headers=_bearer(tokens, permissions=["*"]))

        assert response.status_code == 200

    def test_localized_guard_error(self, client, tokens):
        response = client.get(
            "/admin",
            headers={**_bearer(tokens, roles=["USER"]), "Accept-Language": "vi-VN,vi;q=0.9,en;q=0.5"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Không đủ quyền truy cập"


class TestAuthUtils:
    def test_extract_bearer_token(self):
        assert extract_bearer_token({"Authorization": "Bearer abc"}) == "abc"
        assert extract_bearer_token({"Authorization": "bearer  abc "}) == "abc"
        assert extract_bearer_token({"Authorization": "Bearer "}) is None
        assert extract_bearer_token({}) is None

    def test_role_and_permission_checks(self):
        assert has_any_role(["USER"], [])
        assert has_any_role(["USER", "ADMIN"], ["ADMIN"])
        assert not has_any_role([], ["ADMIN"])
        assert has_all_permissions(["a", "b"], ["a", "b"])
        assert not has_all_permissions(["a"], ["a", "b"])
        assert has_all_permissions(["*"], ["anything"])
