from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from shared.errors.error_codes import CatalogServiceErrorCodes
from shared.errors.resolver import ErrorResolver
from shared.rpc.server import RpcRouter
from shared.utils.app_logger import get_logger

from catalog_service.repository import InMemoryProductRepository

logger = get_logger(__name__)


class CatalogHandlers:
    def __init__(self, repository: InMemoryProductRepository, resolver: ErrorResolver):
        self.repository = repository
        self.resolver = resolver

    async def find_by_id(self, data: Dict[str, Any]) -> Dict[str, Any]:
        product_id = data.get("id")
        product = self.repository.get(str(product_id)) if product_id else None
        if product is None:
            self.resolver.raise_error(CatalogServiceErrorCodes.PRODUCT_NOT_FOUND, {"id": product_id})
        return product.to_public()

    async def list_products(self, data: Dict[str, Any]) -> Dict[str, Any]:
        products = [p.to_public() for p in self.repository.list()]
        return {"items": products, "total": len(products)}

    def _parse_price(self, value: Any) -> Decimal:
        try:
            price = Decimal(str(value))
        except InvalidOperation:
            price = None
        if price is None or not price.is_finite() or price < 0:
            self.resolver.raise_error(CatalogServiceErrorCodes.INVALID_PRODUCT_DATA, {"price": str(value)})
        return price

    async def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        sku = str(data.get("sku") or "").strip()
        name = str(data.get("name") or "").strip()
        if not sku or not name:
            self.resolver.raise_error(
                CatalogServiceErrorCodes.INVALID_PRODUCT_DATA,
                {"missing": [k for k, v in (("sku", sku), ("name", name)) if not v]},
            )
        price = self._parse_price(data.get("price", "0"))

        if self.repository.find_by_sku(sku):
            self.resolver.raise_error(CatalogServiceErrorCodes.PRODUCT_ALREADY_EXISTS, {"sku": sku})

        product = self.repository.create(
            sku=sku,
            name=name,
            description=data.get("description"),
            price=price,
            currency=data.get("currency") or "USD",
        )
        logger.info(f"Created product {product.id} ({product.sku})")
        return product.to_public()

    def register(self, router: RpcRouter) -> RpcRouter:
        router.add_pattern("catalog.product.find_by_id", self.find_by_id)
        router.add_pattern("catalog.product.list", self.list_products)
        router.add_pattern("catalog.product.create", self.create_product)
        return router
