import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize the storefront domain once; each test pushes its own domain
    context so threads started by a test can push theirs.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import storefront
    from storefront.shared.logging import configure_logging

    storefront.init()
    configure_logging(session.config.option.env, force=True)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def domain():
    from storefront.domain import storefront

    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(domain)

    yield

    drop_db(domain)


@pytest.fixture(autouse=True)
def run_around_tests(domain):
    """Push the domain context before each test; empty every store after it."""
    from storefront.notifications.channel import reset_channels
    from storefront.utils.db import reset_data

    ctx = domain.domain_context()
    ctx.push()

    yield

    reset_data(domain)
    reset_channels()
    ctx.pop()


@pytest.fixture
def channel():
    from storefront.notifications.channel import configured_channel

    fake = configured_channel()
    fake.reset()
    return fake


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
def _register(name, email, role):
    from protean.utils.globals import current_domain

    from storefront.identity.user.authentication import actor_for
    from storefront.identity.user.registration import registration
    from storefront.identity.user.user import User

    number = current_domain.process(registration(name, email, "secret123", role=role), asynchronous=False)
    return actor_for(current_domain.repository_for(User).get_by_number(number))


@pytest.fixture
def admin():
    from storefront.identity.user.user import Role

    return _register("Ada Admin", "admin@example.com", Role.ADMIN)


@pytest.fixture
def customer():
    from storefront.identity.user.user import Role

    return _register("Carla Customer", "carla@example.com", Role.CUSTOMER)


@pytest.fixture
def other_customer():
    from storefront.identity.user.user import Role

    return _register("Otto Other", "otto@example.com", Role.CUSTOMER)


# ---------------------------------------------------------------------------
# Catalogue and orders
# ---------------------------------------------------------------------------
@pytest.fixture
def make_product(admin):
    """Factory: create a product as the admin and return it."""
    from protean.utils.globals import current_domain

    from storefront.catalogue.product.management import CreateProduct
    from storefront.catalogue.product.product import Product
    from storefront.shared.payload import encode

    def _make(name="Classic Tee", price=10.0, stock=None, size_stocks=None, brand="Acme", **fields):
        command = CreateProduct(
            name=name,
            price=price,
            brand=brand,
            stock=stock,
            size_stocks=encode(size_stocks),
            **fields,
            **admin.stamp(),
        )
        number = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Product).get_by_number(number)

    return _make


@pytest.fixture
def place_order(customer):
    """Factory: place an order for ``actor`` (default: the customer) and return the Order.

    ``lines`` is a list of ``(product, quantity)`` or ``(product, quantity, size)``.
    """
    from protean.utils.globals import current_domain

    from storefront.ordering.order.creation import CreateOrder
    from storefront.ordering.order.order import Order
    from storefront.shared.payload import encode

    def _place(lines, actor=None):
        actor = actor or customer
        line_inputs = []
        for entry in lines:
            product, quantity = entry[0], entry[1]
            size = entry[2] if len(entry) > 2 else None
            line_inputs.append(
                {
                    "product_id": product.number,
                    "product_name": product.name,
                    "price": product.final_price,
                    "quantity": quantity,
                    "size": size,
                }
            )
        total = round(sum(line["price"] * line["quantity"] for line in line_inputs), 2)
        command = CreateOrder(
            user_id=actor.actor_id,
            customer_name="Carla Customer",
            address="1 Main Street, Springfield",
            phone="555-0100",
            lines=encode(line_inputs),
            total=total,
            **actor.stamp(),
        )
        result = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Order).get_by_number(result["order_id"])

    return _place


@pytest.fixture
def transition():
    """Factory: move an order to ``status`` as ``actor``; returns the order summary."""
    from protean.utils.globals import current_domain

    from storefront.ordering.order.lifecycle import TransitionStatus

    def _transition(actor, order_id, status):
        command = TransitionStatus(order_id=order_id, status=status, **actor.stamp())
        return current_domain.process(command, asynchronous=False)

    return _transition


@pytest.fixture
def stock_of():
    """Read a product's live counters straight from the database."""
    from protean.utils.globals import current_domain

    from storefront.inventory.stock.item import InventoryItem

    def _stock(product_id):
        return current_domain.repository_for(InventoryItem).levels(product_id)

    return _stock
