"""Product administration — commands and handler.

Creating, editing and deleting products is reserved to administrators.
Every change that touches a product's counters leaves a ``StockMovement``
behind, which announces itself with ``InventoryChanged`` once the unit of
work has committed.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import EDITABLE_FIELDS, Product
from storefront.domain import storefront
from storefront.identity.access import actor_of, require_admin
from storefront.identity.user.user import Role
from storefront.inventory.stock.item import ONE_SIZE, InventoryItem
from storefront.inventory.stock.movement import MovementReason, StockMovement
from storefront.shared.payload import decode
from storefront.shared.sequence import Counter

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    brand: String(max_length=100, default="")
    category: String(max_length=100, default="")
    price: Float(required=True, min_value=0.0)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)
    description: Text(default="")
    image_url: String(max_length=500, default="")
    size_stocks: Text()  # JSON: {size: count}; makes the product size-tracked
    stock: Integer(min_value=0)  # single counter for products without sizes
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update; fields left unset are unchanged.

    ``sizes`` redefines the set of sizes the product is stocked in. Counts of
    sizes that stay are never touched here.
    """

    product_id: Integer(required=True)
    name: String(max_length=255)
    brand: String(max_length=100)
    category: String(max_length=100)
    price: Float(min_value=0.0)
    discount: Float(min_value=0.0, max_value=100.0)
    description: Text()
    image_url: String(max_length=500)
    sizes: Text()  # JSON: [size, ...]
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Integer(required=True)
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


def _initial_counters(command) -> dict[str, int]:
    size_stocks = decode(command.size_stocks, "size_stocks")
    if size_stocks and command.stock is not None:
        raise ValidationError({"stock": ["Provide either size_stocks or stock, not both"]})
    if not size_stocks:
        return {ONE_SIZE: command.stock or 0}

    if not isinstance(size_stocks, dict):
        raise ValidationError({"size_stocks": ["Must map each size to its stock count"]})
    counters = {}
    for size, count in size_stocks.items():
        size = str(size).strip()
        if not size:
            raise ValidationError({"size_stocks": ["Size names cannot be blank"]})
        if size == ONE_SIZE:
            raise ValidationError({"size_stocks": [f"'{ONE_SIZE}' is a reserved size name"]})
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValidationError({"size_stocks": ["Size stock counts must be non-negative integers"]})
        counters[size] = count
    return counters


def _wanted_sizes(command) -> list[str]:
    sizes = decode(command.sizes, "sizes")
    if not isinstance(sizes, list):
        raise ValidationError({"sizes": ["Must be a list of size names"]})
    wanted = [str(size).strip() for size in sizes]
    if any(not size for size in wanted):
        raise ValidationError({"sizes": ["Size names cannot be blank"]})
    if ONE_SIZE in wanted:
        raise ValidationError({"sizes": [f"'{ONE_SIZE}' is a reserved size name"]})
    return list(dict.fromkeys(wanted)) or [ONE_SIZE]


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        actor = actor_of(command)
        require_admin(actor, "create products")
        counters = _initial_counters(command)

        product = Product(
            number=current_domain.repository_for(Counter).next_value("products"),
            name=command.name,
            brand=command.brand or "",
            category=command.category or "",
            price=command.price,
            discount=command.discount or 0.0,
            description=command.description or "",
            image_url=command.image_url or "",
        )
        current_domain.repository_for(Product).add(product)
        current_domain.repository_for(InventoryItem).open_counters(product.number, counters)
        current_domain.repository_for(StockMovement).add(
            StockMovement.record(
                product_id=product.number,
                product_name=product.name,
                reason=MovementReason.CREATED.value,
                new_stock=sum(counters.values()),
                delta=sum(counters.values()),
            )
        )

        logger.info("Product created", product_id=product.number, stock=sum(counters.values()), sizes=list(counters))
        return product.number

    @handle(UpdateProduct)
    def update_product(self, command):
        actor = actor_of(command)
        require_admin(actor, "update products")

        products = current_domain.repository_for(Product)
        inventory = current_domain.repository_for(InventoryItem)
        product = products.get_by_number(command.product_id)
        product.update_details(**{field: getattr(command, field) for field in EDITABLE_FIELDS})

        if command.sizes is not None:
            self._redefine_sizes(inventory, product, _wanted_sizes(command))
        products.add(product)

        current_domain.repository_for(StockMovement).add(
            StockMovement.record(
                product_id=product.number,
                product_name=product.name,
                reason=MovementReason.UPDATED.value,
                new_stock=inventory.total(product.number),
            )
        )

        logger.info("Product updated", product_id=product.number, sizes=list(inventory.levels(product.number)))
        return product.number

    def _redefine_sizes(self, inventory, product, wanted):
        """Change the set of sizes the product is stocked in.

        New sizes start at zero. A size can only be dropped while its counter
        is zero, so redefining sizes never writes stock off silently. An empty
        list turns the product back into a single ``ONE_SIZE`` counter.
        """
        levels = inventory.levels(product.number)
        dropped = [size for size in levels if size not in wanted]
        stocked = [size for size in dropped if levels[size] > 0]
        if stocked:
            raise ValidationError({"sizes": [f"Cannot remove size {size} while it holds stock" for size in stocked]})

        inventory.close_counters(product.number, dropped)
        inventory.open_counters(product.number, {size: 0 for size in wanted if size not in levels})

    @handle(DeleteProduct)
    def delete_product(self, command):
        actor = actor_of(command)
        require_admin(actor, "delete products")

        products = current_domain.repository_for(Product)
        inventory = current_domain.repository_for(InventoryItem)
        product = products.get_by_number(command.product_id)
        written_off = inventory.total(product.number)

        inventory.close_counters(product.number)
        products.remove(product)
        current_domain.repository_for(StockMovement).add(
            StockMovement.record(
                product_id=product.number,
                product_name=product.name,
                reason=MovementReason.DELETED.value,
                new_stock=0,
                delta=-written_off,
            )
        )

        logger.info("Product deleted", product_id=product.number)
