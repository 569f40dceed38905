import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from protean.integrations.pytest import DomainFixture

from app import create_app
from bootstrap import build_container
from menu.product.product import Product, ProductCategory
from payments.gateway.fake_adapter import FakeGateway
from shared.config import Environment, FailurePolicyName, Settings, load_settings
from shared.db import drop_db, reset_data, setup_db
from shared.domain import configure_domain, quickbite, register_aggregates


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


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


@pytest.fixture(scope="session")
def quickbite_bed(request):
    """The quickbite domain, initialized once against ``QUICKBITE_DATABASE``.

    The test overlay uses the memory provider; set ``QUICKBITE_DATABASE`` to a
    SQLite or PostgreSQL URI to run the suite on Protean's SQLAlchemy providers.
    """
    os.environ["QUICKBITE_ENV"] = request.config.option.env
    register_aggregates()
    configure_domain(load_settings())

    bed = DomainFixture(quickbite)
    bed.setup()
    setup_db(quickbite)
    yield bed
    drop_db(quickbite)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(quickbite_bed):
    with quickbite_bed.domain_context():
        yield
    reset_data(quickbite)


@pytest.fixture()
def settings():
    return Settings(env=Environment.TEST)


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def container(settings, gateway):
    return build_container(settings, gateway=gateway)


@pytest.fixture()
def cancel_container(gateway):
    settings = Settings(env=Environment.TEST, payment_failure_policy=FailurePolicyName.CANCEL)
    return build_container(settings, gateway=gateway)


@pytest.fixture()
def make_product(container):
    def _make(name="X-Burger", unit_price="14.95", category=ProductCategory.SNACK, quantity_on_hand=0):
        product = Product.create(
            name=name, category=category, unit_price=unit_price, quantity_on_hand=quantity_on_hand
        )
        container.products.add(product)
        return product

    return _make


@pytest.fixture()
def api(container):
    app = create_app(container=container)
    with TestClient(app) as client:
        yield client
