"""
Symbolic error codes, one namespace per service.

Handlers reference these constants instead of raw literals; every constant
must have an entry in the owning service's catalog.
"""

from typing import List


class AuthServiceErrorCodes:
    INVALID_CREDENTIALS = "AUTH_SERVICE.0001"
    USER_NOT_FOUND = "AUTH_SERVICE.0002"
    USER_ALREADY_EXISTS = "AUTH_SERVICE.0003"
    EMAIL_ALREADY_EXISTS = "AUTH_SERVICE.0004"
    USERNAME_ALREADY_EXISTS = "AUTH_SERVICE.0005"
    INVALID_TOKEN = "AUTH_SERVICE.0006"
    TOKEN_EXPIRED = "AUTH_SERVICE.0007"
    REFRESH_TOKEN_NOT_FOUND = "AUTH_SERVICE.0008"
    REFRESH_TOKEN_REVOKED = "AUTH_SERVICE.0009"
    REFRESH_TOKEN_EXPIRED = "AUTH_SERVICE.0010"
    ACCOUNT_ALREADY_ACTIVE = "AUTH_SERVICE.0011"
    ACCOUNT_ACTIVATION_FAILED = "AUTH_SERVICE.0012"
    ACCOUNT_DEACTIVATED = "AUTH_SERVICE.0013"
    ACCOUNT_NOT_VERIFIED = "AUTH_SERVICE.0014"


class IamServiceErrorCodes:
    # Users
    USER_NOT_FOUND = "IAM_SERVICE.0001"
    USER_ALREADY_EXISTS = "IAM_SERVICE.0002"
    INVALID_USER_DATA = "IAM_SERVICE.0003"

    # Roles
    ROLE_NOT_FOUND = "IAM_SERVICE.0100"
    ROLE_ALREADY_EXISTS = "IAM_SERVICE.0101"
    INVALID_ROLE_DATA = "IAM_SERVICE.0102"

    # Permissions
    PERMISSION_NOT_FOUND = "IAM_SERVICE.0200"
    PERMISSION_ALREADY_EXISTS = "IAM_SERVICE.0201"
    INVALID_PERMISSION_DATA = "IAM_SERVICE.0202"

    # Organizations
    ORGANIZATION_NOT_FOUND = "IAM_SERVICE.0300"
    ORGANIZATION_ALREADY_EXISTS = "IAM_SERVICE.0301"
    INVALID_ORGANIZATION_DATA = "IAM_SERVICE.0302"
    ORGANIZATION_HAS_USERS = "IAM_SERVICE.0303"

    # Assignments
    USER_ROLE_ASSIGNMENT_FAILED = "IAM_SERVICE.0400"
    USER_ROLE_REMOVAL_FAILED = "IAM_SERVICE.0401"
    ROLE_PERMISSION_ASSIGNMENT_FAILED = "IAM_SERVICE.0500"
    ROLE_PERMISSION_REMOVAL_FAILED = "IAM_SERVICE.0501"

    # Access control
    INSUFFICIENT_PERMISSIONS = "IAM_SERVICE.0600"
    FORBIDDEN_ACCESS = "IAM_SERVICE.0601"


class CatalogServiceErrorCodes:
    PRODUCT_NOT_FOUND = "CATALOG_SERVICE.0001"
    PRODUCT_ALREADY_EXISTS = "CATALOG_SERVICE.0002"
    INVALID_PRODUCT_DATA = "CATALOG_SERVICE.0003"


class ApiGatewayErrorCodes:
    VALIDATION_FAILED = "API_GATEWAY.0001"
    MISSING_REQUIRED_FIELDS = "API_GATEWAY.0002"


def codes_of(namespace: type) -> List[str]:
    """All code values declared on a namespace class."""
    return [
        value
        for name, value in vars(namespace).items()
        if name.isupper() and isinstance(value, str)
    ]
