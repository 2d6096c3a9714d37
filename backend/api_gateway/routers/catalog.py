from fastapi import APIRouter, Depends

from shared.rpc.client import RpcClient
from shared.security.guards import require_permissions

from api_gateway.dependencies import get_catalog_client
from api_gateway.schemas import CreateProductRequest

router = APIRouter(prefix="/api/v1/catalog", tags=["Catalog"])


@router.get("/products", dependencies=[Depends(require_permissions("catalog:read"))])
async def list_products(catalog: RpcClient = Depends(get_catalog_client)):
    return await catalog.send("catalog.product.list")


@router.get("/products/{product_id}", dependencies=[Depends(require_permissions("catalog:read"))])
async def get_product(product_id: str, catalog: RpcClient = Depends(get_catalog_client)):
    return await catalog.send("catalog.product.find_by_id", {"id": product_id})


@router.post(
    "/products",
    status_code=201,
    dependencies=[Depends(require_permissions("catalog:write"))],
)
async def create_product(body: CreateProductRequest, catalog: RpcClient = Depends(get_catalog_client)):
    return await catalog.send("catalog.product.create", body.to_rpc())
