"""Pytest fixtures for the store API tests."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.database import get_session
from app.models.cart import Cart, CartItem
from app.models.product import Product
from app.models.user import User
from app.utils.token import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    from app.main import app

    def _get_session_override():
        return session

    app.dependency_overrides[get_session] = _get_session_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make_user(name="Test User", email=None, role="user"):
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        user = User(name=name, email=email, role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin User", role="admin")


@pytest.fixture
def make_product(session):
    def _make_product(name="Test Headphones", price=60.0, stock=5, images=None):
        product = Product(
            name=name,
            description="Premium wireless headphones",
            brand="TestBrand",
            category="Headphones",
            price=price,
            stock=stock,
            images=images if images is not None else [f"/img/{name.lower().replace(' ', '-')}.jpg"],
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def fill_cart(session):
    """Put lines straight into a user's cart, bypassing stock checks."""

    def _fill_cart(user, *lines):
        cart = Cart(user_id=user.id)
        for product, quantity, *rest in lines:
            cart.items.append(
                CartItem(
                    product_id=product.id,
                    product_name=product.name,
                    image=product.primary_image,
                    quantity=quantity,
                    price=product.price,
                    color=rest[0] if rest else None,
                )
            )
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart

    return _fill_cart


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def shipping_address():
    return {
        "name": "Test User",
        "phone": "+92 300 1234567",
        "street": "12 Mall Road",
        "city": "Lahore",
        "state": "Punjab",
        "zip_code": "54000",
        "country": "Pakistan",
    }
