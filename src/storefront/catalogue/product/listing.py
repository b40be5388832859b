"""Catalogue reads — products with their live stock figures."""

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.inventory.stock.item import ONE_SIZE, InventoryItem


def product_details(product: Product, levels: dict[str, int]) -> dict:
    return {
        "id": product.number,
        "name": product.name,
        "brand": product.brand or "",
        "category": product.category or "",
        "price": product.price,
        "discount": product.discount or 0.0,
        "final_price": product.final_price,
        "description": product.description or "",
        "image_url": product.image_url or "",
        "stock": sum(levels.values()),
        "size_stocks": levels,
        "sizes": [size for size in levels if size != ONE_SIZE],
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def get_product(number: int) -> dict:
    product = current_domain.repository_for(Product).get_by_number(number)
    return product_details(product, current_domain.repository_for(InventoryItem).levels(number))


def list_products(brand: str | None = None) -> list[dict]:
    inventory = current_domain.repository_for(InventoryItem)
    return [
        product_details(product, inventory.levels(product.number))
        for product in current_domain.repository_for(Product).catalogue(brand=brand)
    ]


def list_brands() -> list[str]:
    return current_domain.repository_for(Product).brands()
