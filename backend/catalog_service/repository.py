import uuid
from typing import Dict, List, Optional

from catalog_service.entities import Product


class InMemoryProductRepository:
    def __init__(self):
        self._products: Dict[str, Product] = {}

    def create(self, **fields) -> Product:
        product = Product(id=uuid.uuid4().hex, **fields)
        self._products[product.id] = product
        return product

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def find_by_sku(self, sku: str) -> Optional[Product]:
        return next((p for p in self._products.values() if p.sku == sku), None)

    def list(self) -> List[Product]:
        return sorted(self._products.values(), key=lambda p: p.created_at)
