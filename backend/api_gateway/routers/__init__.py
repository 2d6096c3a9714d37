from api_gateway.routers import auth, catalog, iam

__all__ = ["auth", "catalog", "iam"]
