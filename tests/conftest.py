"""
Pytest configuration and fixtures.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

import storefront.data.models  # noqa: F401
from storefront.data.database import Base
from storefront.data.models import CustomerModel, ProductModel
from storefront.repos.cart_repo import CartRepo


class FakeRedis:
    """Redis w pamieci: get/setex/delete, liczy zapisy."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.writes = 0

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.writes += 1
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        self.writes += 1
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def ping(self):
        return True


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'storefront.db'}",
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cart_repo(fake_redis):
    return CartRepo(fake_redis, ttl=3600)


@pytest.fixture
def catalog(db):
    """Trzy produkty i jeden klient."""
    products = [
        ProductModel(id=1, name="Keyboard", price=Decimal("50.00"), stock_quantity=10, image_url="kb.png"),
        ProductModel(id=2, name="Mouse", price=Decimal("20.00"), stock_quantity=5),
        ProductModel(id=3, name="Monitor", price=Decimal("300.00"), stock_quantity=1),
    ]
    db.add_all(products)
    db.add(CustomerModel(id=1, first_name="Jan", last_name="Kowalski", email="jan@example.com"))
    db.add(CustomerModel(id=2, first_name="Anna", last_name="Nowak", email="anna@example.com"))
    db.commit()
    return {p.id: p for p in products}


@pytest.fixture
def read_product(session_factory):
    """Odczyt produktu swieza sesja, z pominieciem identity map."""

    def _read(product_id):
        with session_factory() as session:
            return session.get(ProductModel, product_id)

    return _read


@pytest.fixture
def read_customer(session_factory):
    def _read(customer_id):
        with session_factory() as session:
            return session.get(CustomerModel, customer_id)

    return _read
