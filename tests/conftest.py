import os
import tempfile
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

    Point every domain at a throwaway SQLite file and a fixed JWT secret
    before any module reads the settings. A file (not ``:memory:``) lets all
    the domain providers and the request threads share one database.
    """
    database_dir = tempfile.mkdtemp(prefix="gamevault-")
    os.environ["GAMEVAULT_ENV"] = session.config.option.env
    os.environ["DATABASE_URL"] = f"sqlite:///{database_dir}/gamevault-test.db"
    os.environ["JWT_SECRET"] = "test-secret-key-for-gamevault"
    os.environ["PUBLIC_BASE_URL"] = "http://api.gamevault.test"
    os.environ["FRONTEND_URL"] = "http://shop.gamevault.test"

    from shared.config import get_settings

    get_settings.cache_clear()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _domains():
    """Initialize every bounded context once per session."""
    from app import DOMAINS, init_domains

    init_domains()
    return DOMAINS


@pytest.fixture(scope="session", autouse=True)
def setup_db(_domains):
    from shared.domain import drop_db, setup_db

    for domain in _domains:
        setup_db(domain)

    yield

    for domain in _domains:
        drop_db(domain)


@pytest.fixture(autouse=True)
def run_around_tests(_domains):
    """Fresh fake adapters for every test, and empty tables afterwards."""
    from files.storage import set_storage
    from files.storage.fake_adapter import FakeStorage
    from notifications.channel import set_email_channel
    from notifications.channel.fake_email import FakeEmailAdapter
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway
    from shared.domain import reset_data

    set_email_channel(FakeEmailAdapter())
    set_storage(FakeStorage())
    set_gateway(FakeGateway())

    yield

    for domain in _domains:
        reset_data(domain)


@pytest.fixture()
def email_channel():
    from notifications.channel import get_email_channel

    return get_email_channel()


@pytest.fixture()
def storage():
    from files.storage import get_storage

    return get_storage()


@pytest.fixture()
def gateway():
    from payments.gateway import get_gateway

    return get_gateway()


@pytest.fixture()
def mailer():
    from notifications.dispatch import get_mailer

    return get_mailer()


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from app import create_app

    return TestClient(create_app())


# ---------------------------------------------------------------------------
# Factories
#
# Each factory persists inside the owning domain's context, so tests of any
# bounded context can seed users, products or coupons.
# ---------------------------------------------------------------------------
@pytest.fixture()
def create_user():
    from protean.utils.globals import current_domain

    from identity.domain import identity
    from identity.user.authentication import hash_password
    from identity.user.user import User, UserRole

    counter = {"n": 0}

    def _create_user(
        email: str | None = None,
        password: str = "s3cret-pass",
        name: str = "Ana Gamer",
        role: UserRole = UserRole.CLIENT,
    ):
        counter["n"] += 1
        with identity.domain_context():
            user = User.register(
                email=email or f"player{counter['n']}@example.com",
                password_hash=hash_password(password),
                name=name,
                role=role,
            )
            current_domain.repository_for(User).add(user)
        return user

    return _create_user


@pytest.fixture()
def create_admin(create_user):
    from identity.user.user import UserRole

    def _create_admin(email: str = "admin@gamevault.test", **kwargs):
        return create_user(email=email, role=UserRole.ADMIN, **kwargs)

    return _create_admin


@pytest.fixture()
def auth_headers():
    from identity.user.authentication import create_access_token

    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _auth_headers


@pytest.fixture()
def create_category():
    from protean.utils.globals import current_domain

    from catalogue.category.category import Category
    from catalogue.domain import catalogue

    counter = {"n": 0}

    def _create_category(name: str | None = None):
        counter["n"] += 1
        with catalogue.domain_context():
            category = Category.create(name or f"Category {counter['n']}")
            current_domain.repository_for(Category).add(category)
        return category

    return _create_category


@pytest.fixture()
def create_product(create_category):
    from protean.utils.globals import current_domain

    from catalogue.domain import catalogue
    from catalogue.product.product import Product, ProductType

    def _create_product(
        name: str = "Hollow Knight",
        price: float = 19.99,
        stock: int = 10,
        type: ProductType = ProductType.DIGITAL,
        category=None,
        is_active: bool = True,
    ):
        category = category or create_category()
        with catalogue.domain_context():
            product = Product.create(
                name=name,
                price=price,
                stock=stock,
                category_id=str(category.id),
                type=type,
            )
            product.is_active = is_active
            current_domain.repository_for(Product).add(product)
        return product

    return _create_product


@pytest.fixture()
def product_stock():
    """Read a product's current stock straight from the catalogue."""
    from protean.utils.globals import current_domain

    from catalogue.domain import catalogue
    from catalogue.product.product import Product

    def _product_stock(product_id) -> int:
        with catalogue.domain_context():
            return current_domain.repository_for(Product).get(str(product_id)).stock

    return _product_stock


@pytest.fixture()
def create_coupon():
    from datetime import date, timedelta

    from protean.utils.globals import current_domain

    from ordering.coupon.coupon import Coupon
    from ordering.domain import ordering

    def _create_coupon(
        discount_percentage: int = 10,
        expiration_date: date | None = None,
        code: str | None = None,
        is_active: bool = True,
    ):
        with ordering.domain_context():
            coupon = Coupon.create(
                discount_percentage=discount_percentage,
                expiration_date=expiration_date or date.today() + timedelta(days=30),
                code=code,
            )
            coupon.is_active = is_active
            current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _create_coupon
