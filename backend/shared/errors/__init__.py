"""
Error catalog, codes, resolution and propagation
"""

from .catalog import (
    CatalogLoadError,
    ErrorCatalog,
    ErrorCatalogEntry,
    load_error_catalog,
    verify_catalog_codes,
)
from .error_codes import (
    ApiGatewayErrorCodes,
    AuthServiceErrorCodes,
    CatalogServiceErrorCodes,
    IamServiceErrorCodes,
    codes_of,
)
from .error_envelope import build_error_envelope
from .resolver import ErrorResolver, ResolvedError
from .rpc_reconciler import RpcErrorProbe, RpcErrorReconciler, RpcFailure, reconcile_rpc_error

__all__ = [
    "ApiGatewayErrorCodes",
    "AuthServiceErrorCodes",
    "CatalogLoadError",
    "CatalogServiceErrorCodes",
    "ErrorCatalog",
    "ErrorCatalogEntry",
    "ErrorResolver",
    "IamServiceErrorCodes",
    "ResolvedError",
    "RpcErrorProbe",
    "RpcErrorReconciler",
    "RpcFailure",
    "build_error_envelope",
    "codes_of",
    "load_error_catalog",
    "reconcile_rpc_error",
    "verify_catalog_codes",
]
