import json

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    bed = DomainFixture(ordering)
    bed.setup()
    setup_db(ordering)
    yield bed
    drop_db(ordering)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def catalog():
    from ordering.lookups import reset_lookups, set_catalog
    from ordering.lookups.in_memory import InMemoryProductCatalog

    catalog = InMemoryProductCatalog()
    catalog.register("prod-widget", "Widget", 50.0)
    catalog.register("prod-gadget", "Gadget", 20.0)
    catalog.register("prod-gizmo", "Gizmo", 7.5)
    set_catalog(catalog)
    yield catalog
    reset_lookups()


@pytest.fixture(autouse=True)
def address_book(catalog):
    from ordering.lookups import set_address_book
    from ordering.lookups.in_memory import InMemoryAddressBook

    book = InMemoryAddressBook()
    book.register("addr-home", "123 Main St", "Springfield", "62701", "US", state="IL")
    book.register("addr-office", "500 Market St", "San Francisco", "94105", "US", state="CA")
    set_address_book(book)
    yield book


@pytest.fixture(autouse=True)
def publisher():
    from ordering.publisher import reset_publisher, set_publisher
    from ordering.publisher.in_memory import InMemorySplitPublisher

    publisher = InMemorySplitPublisher()
    set_publisher(publisher)
    yield publisher
    reset_publisher()


@pytest.fixture()
def place_order():
    """Factory: place an order through CreateOrder and return its id.

    Defaults to the reference order: 10 Widgets at 50.00, tax 50.00,
    shipping 10.00.
    """
    from ordering.order.creation import CreateOrder
    from protean import current_domain

    def _place(items=None, tax=50.0, shipping_cost=10.0, address_id="addr-home", customer_id="cust-001"):
        if items is None:
            items = [{"product_id": "prod-widget", "quantity": 10, "unit_price": 50.0}]
        return current_domain.process(
            CreateOrder(
                customer_id=customer_id,
                address_id=address_id,
                items=json.dumps(items),
                shipping_cost=shipping_cost,
                tax=tax,
            ),
            asynchronous=False,
        )

    return _place
