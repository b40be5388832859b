"""Repository for the Product aggregate, looked up by public number."""

from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_number(self, number: int) -> Product | None:
        products = self._dao.query.filter(number=number).all().items
        return products[0] if products else None

    def get_by_number(self, number: int) -> Product:
        product = self.find_by_number(number)
        if product is None:
            raise ObjectNotFoundError(f"Product {number} not found")
        return product

    def catalogue(self, brand: str | None = None) -> list[Product]:
        query = self._dao.query.order_by("number")
        if brand:
            query = query.filter(brand=brand)
        return query.limit(None).all().items

    def brands(self) -> list[str]:
        return sorted({product.brand for product in self.catalogue() if product.brand})

    def remove(self, product: Product) -> None:
        self._dao.delete(product)
