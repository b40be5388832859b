"""Application tests for product administration."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.product.listing import get_product, list_brands, list_products
from storefront.catalogue.product.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.inventory.stock.item import ONE_SIZE
from storefront.notifications.notification.dispatch import ADMIN_CHANNEL
from storefront.shared.exceptions import PermissionDenied
from storefront.shared.payload import encode


def _update(actor, product_id, **fields):
    if "sizes" in fields:
        fields["sizes"] = encode(fields["sizes"])
    current_domain.process(UpdateProduct(product_id=product_id, **fields, **actor.stamp()), asynchronous=False)


def _delete(actor, product_id):
    current_domain.process(DeleteProduct(product_id=product_id, **actor.stamp()), asynchronous=False)


class TestCreateProductValidation:
    def test_sized_and_flat_stock_are_exclusive(self, make_product):
        with pytest.raises(ValidationError) as exc:
            make_product(stock=3, size_stocks={"M": 1})
        assert "stock" in exc.value.messages

    def test_negative_size_count_rejected(self, make_product):
        with pytest.raises(ValidationError) as exc:
            make_product(size_stocks={"M": -1})
        assert "size_stocks" in exc.value.messages

    def test_reserved_size_name_rejected(self, make_product):
        with pytest.raises(ValidationError):
            make_product(size_stocks={ONE_SIZE: 1})

    def test_malformed_size_stocks_rejected(self, admin):
        command = CreateProduct(name="Tee", price=10, size_stocks="{not json", **admin.stamp())
        with pytest.raises(ValidationError) as exc:
            current_domain.process(command, asynchronous=False)
        assert exc.value.messages == {"size_stocks": ["Must be valid JSON"]}

    @pytest.mark.parametrize("discount", [-1, 101])
    def test_discount_range(self, admin, discount):
        with pytest.raises(ValidationError):
            CreateProduct(name="Tee", price=10, discount=discount, **admin.stamp())


class TestCreateProduct:
    def test_products_get_sequential_ids(self, make_product):
        first = make_product(stock=1)
        second = make_product(name="Mug", stock=2)
        assert first.number == 1
        assert second.number == first.number + 1

    def test_flat_stock_is_persisted(self, make_product, stock_of):
        product = make_product(stock=5)
        assert stock_of(product.number) == {ONE_SIZE: 5}

    def test_default_stock_is_zero(self, make_product, stock_of):
        product = make_product()
        assert stock_of(product.number) == {ONE_SIZE: 0}

    def test_sized_stock_is_persisted(self, make_product, stock_of):
        product = make_product(size_stocks={"S": 1, "M": 2})
        assert stock_of(product.number) == {"M": 2, "S": 1}

    def test_emits_inventory_changed(self, make_product, channel):
        product = make_product(stock=5)
        [message] = channel.messages_for(ADMIN_CHANNEL, "InventoryChanged")
        assert message["payload"]["product_id"] == product.number
        assert message["payload"]["new_stock"] == 5
        assert message["payload"]["reason"] == "created"

    def test_customer_cannot_create(self, customer, stock_of):
        command = CreateProduct(name="Tee", price=10, stock=1, **customer.stamp())
        with pytest.raises(PermissionDenied):
            current_domain.process(command, asynchronous=False)
        assert list_products() == []


class TestUpdateProduct:
    def test_partial_update(self, admin, make_product):
        product = make_product(stock=5, brand="Acme")
        _update(admin, product.number, price=12.5)

        updated = get_product(product.number)
        assert updated["price"] == 12.5
        assert updated["brand"] == "Acme"
        assert updated["stock"] == 5

    def test_add_size_keeps_existing_counts(self, admin, make_product, stock_of):
        product = make_product(size_stocks={"M": 4})
        _update(admin, product.number, sizes=["M", "L"])
        assert stock_of(product.number) == {"L": 0, "M": 4}

    def test_removing_stocked_size_rejected(self, admin, make_product, stock_of):
        product = make_product(size_stocks={"M": 4, "L": 1})
        with pytest.raises(ValidationError) as exc:
            _update(admin, product.number, sizes=["M"], name="Renamed")
        assert "sizes" in exc.value.messages
        assert stock_of(product.number) == {"L": 1, "M": 4}
        assert get_product(product.number)["name"] == product.name

    def test_empty_sizes_revert_to_one_size(self, admin, make_product, stock_of):
        product = make_product(size_stocks={"M": 0, "L": 0})
        _update(admin, product.number, sizes=[])
        assert stock_of(product.number) == {ONE_SIZE: 0}

    def test_unsized_product_with_stock_cannot_become_sized(self, admin, make_product, stock_of):
        product = make_product(stock=4)
        with pytest.raises(ValidationError):
            _update(admin, product.number, sizes=["S", "M"])
        assert stock_of(product.number) == {ONE_SIZE: 4}

    def test_duplicate_sizes_collapse(self, admin, make_product, stock_of):
        product = make_product(stock=0)
        _update(admin, product.number, sizes=["S", "S", "M"])
        assert stock_of(product.number) == {"M": 0, "S": 0}

    def test_unknown_product(self, admin):
        with pytest.raises(ObjectNotFoundError):
            _update(admin, 999, name="x")


class TestDeleteProduct:
    def test_delete_removes_product_and_counters(self, admin, make_product, stock_of, channel):
        product = make_product(size_stocks={"M": 2})
        channel.reset()
        _delete(admin, product.number)

        with pytest.raises(ObjectNotFoundError):
            get_product(product.number)
        assert stock_of(product.number) == {}
        [message] = channel.messages_for(ADMIN_CHANNEL, "InventoryChanged")
        assert message["payload"]["new_stock"] == 0
        assert message["payload"]["reason"] == "deleted"

    def test_customer_cannot_delete(self, customer, make_product):
        product = make_product(stock=1)
        with pytest.raises(PermissionDenied):
            _delete(customer, product.number)
        assert get_product(product.number)["stock"] == 1


class TestQueries:
    def test_list_with_brand_filter(self, make_product):
        make_product(name="Tee", brand="Acme", stock=1)
        make_product(name="Cap", brand="Zenith", stock=1)
        make_product(name="Mug", brand="Acme", stock=1)

        names = [product["name"] for product in list_products(brand="Acme")]
        assert names == ["Tee", "Mug"]
        assert len(list_products()) == 3

    def test_brands_are_distinct_and_sorted(self, make_product):
        make_product(brand="Zenith", stock=1)
        make_product(brand="Acme", stock=1)
        make_product(brand="Acme", stock=1)
        make_product(brand="", stock=1)
        assert list_brands() == ["Acme", "Zenith"]

    def test_get_product_exposes_counters(self, make_product):
        product = make_product(size_stocks={"M": 2, "L": 1})
        loaded = get_product(product.number)
        assert loaded["size_stocks"] == {"L": 1, "M": 2}
        assert loaded["sizes"] == ["L", "M"]
        assert loaded["stock"] == 3
