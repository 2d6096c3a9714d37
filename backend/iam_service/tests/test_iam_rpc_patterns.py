"""
IAM message patterns, exercised through the service's RPC endpoint
"""

import pytest
from fastapi.testclient import TestClient

from iam_service.main import create_app
from iam_service.repository import InMemoryUserRepository, seed_users


@pytest.fixture
def repository():
    return seed_users(InMemoryUserRepository(), lambda password: f"hashed:{password}")


@pytest.fixture
def client(repository):
    return TestClient(create_app(repository=repository))


def rpc(client, pattern, data=None, **kwargs):
    return client.post(f"/rpc/{pattern}", json={"data": data or {}}, **kwargs)


class TestUserLookups:
    def test_find_by_id(self, client, repository):
        admin = repository.find_by_username("admin")

        response = rpc(client, "iam.user.find_by_id", {"id": admin.id})

        assert response.status_code == 200
        user = response.json()["data"]
        assert user["username"] == "admin"
        assert user["roles"] == ["ADMIN"]
        assert user["isActive"] is True
        assert "passwordHash" not in user

    def test_find_by_id_not_found_reply(self, client):
        response = rpc(client, "iam.user.find_by_id", {"id": "missing"})

        assert response.status_code == 404
        assert response.json() == {"error": {
            "statusCode": 404,
            "errorCode": "IAM_SERVICE.0001",
            "errorDescription": "User not found",
            "metadata": {"id": "missing"},
        }}

    def test_not_found_reply_is_localized(self, client):
        response = rpc(client, "iam.user.find_by_id", {"id": "missing"}, headers={"Accept-Language": "vi"})

        assert response.json()["error"]["errorDescription"] == "Không tìm thấy người dùng"

    def test_find_by_username_or_email_includes_hash(self, client):
        response = rpc(client, "iam.user.find_by_username_or_email", {"usernameOrEmail": "alice@example.com"})

        assert response.status_code == 200
        assert response.json()["data"]["passwordHash"] == "hashed:alice123"

    def test_find_by_username_or_email_not_found(self, client):
        response = rpc(client, "iam.user.find_by_username_or_email", {"usernameOrEmail": "ghost"})

        assert response.status_code == 404
        assert response.json()["error"]["metadata"] == {"usernameOrEmail": "ghost"}

    def test_list_users(self, client):
        data = rpc(client, "iam.user.list").json()["data"]

        assert data["total"] == 3
        assert [u["username"] for u in data["items"]] == ["admin", "alice", "bob"]


class TestUserChanges:
    def test_create_user(self, client):
        response = rpc(client, "iam.user.create", {
            "username": "carol",
            "email": "carol@example.com",
            "passwordHash": "hashed:x",
            "firstName": "Carol",
        })

        assert response.status_code == 200
        user = response.json()["data"]
        assert user["username"] == "carol"
        assert user["firstName"] == "Carol"
        assert user["roles"] == ["USER"]

    @pytest.mark.parametrize("field,value", [("username", "ALICE"), ("email", "alice@example.com")])
    def test_create_duplicate_user(self, client, field, value):
        data = {"username": "someone", "email": "someone@example.com", "passwordHash": "hashed:x", field: value}

        response = rpc(client, "iam.user.create", data)

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["errorCode"] == "IAM_SERVICE.0002"
        assert error["metadata"] == {field: value}

    def test_create_invalid_user(self, client):
        response = rpc(client, "iam.user.create", {"username": "dave"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["errorCode"] == "IAM_SERVICE.0003"
        assert error["metadata"] == {"missing": ["email", "passwordHash"]}

    def test_assign_roles(self, client, repository):
        alice = repository.find_by_username("alice")

        response = rpc(client, "iam.user.assign_roles", {"id": alice.id, "roles": ["CATALOG_MANAGER"]})

        assert response.status_code == 200
        assert response.json()["data"]["roles"] == ["USER", "CATALOG_MANAGER"]

        permissions = rpc(client, "iam.user.get_permissions", {"id": alice.id}).json()["data"]
        assert permissions["permissions"] == ["catalog:read", "catalog:write"]

    def test_assign_unknown_role(self, client, repository):
        alice = repository.find_by_username("alice")

        response = rpc(client, "iam.user.assign_roles", {"id": alice.id, "roles": ["WIZARD"]})

        assert response.status_code == 404
        assert response.json()["error"]["errorCode"] == "IAM_SERVICE.0100"
        assert response.json()["error"]["metadata"] == {"role": "WIZARD"}

    def test_assign_no_roles(self, client, repository):
        alice = repository.find_by_username("alice")

        response = rpc(client, "iam.user.assign_roles", {"id": alice.id, "roles": []})

        assert response.json()["error"]["errorCode"] == "IAM_SERVICE.0400"

    def test_admin_permissions(self, client, repository):
        admin = repository.find_by_username("admin")

        data = rpc(client, "iam.user.get_permissions", {"id": admin.id}).json()["data"]

        assert data == {"roles": ["ADMIN"], "permissions": ["*"]}

    def test_update_last_login(self, client, repository):
        bob = repository.find_by_username("bob")
        assert bob.last_login_at is None

        response = rpc(client, "iam.user.update_last_login", {"id": bob.id})

        assert response.json()["data"]["lastLoginAt"] is not None
        assert repository.get(bob.id).last_login_at is not None


def test_health_reports_catalog(client):
    body = client.get("/health").json()

    assert body["service"] == "iam-service"
    assert body["errorCatalog"] == {"version": "1.0.0", "codes": 19}
