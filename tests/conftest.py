import os

# Settings are read at import time by app.database / app.main.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from app.core.auth import hash_password
from app.database import engine
from app.main import app
from app.models.product import Complement, Product
from app.models.store_config import StoreConfig
from app.models.user import User
from tests.helpers import ADMIN, CUSTOMER, login_headers


@pytest.fixture
def db():
    """Fresh schema with a small catalog and an always-open store."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(
            [
                Product(name="Açaí 500ml", price=5.0, category="acai"),
                Product(name="Açaí Personalizado", price=1.0, category="acai"),
                Product(name="Milkshake", price=12.0, category="drinks"),
                Product(name="Old Cup", price=3.0, is_active=False),
                Complement(name="Granola"),
                Complement(name="Banana"),
                Complement(name="Leite em pó"),
                Complement(name="Paçoca", is_active=False),
                StoreConfig(
                    is_open=True,
                    opening_time="00:00",
                    closing_time="23:59",
                    open_days="0,1,2,3,4,5,6",
                ),
                User(
                    username="admin",
                    email=ADMIN["email"],
                    password_hash=hash_password(ADMIN["password"]),
                    role="admin",
                ),
            ]
        )
        session.commit()
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def customer_headers(client):
    resp = client.post("/api/auth/register", json=CUSTOMER)
    assert resp.status_code == 201, resp.text
    return login_headers(client, CUSTOMER["email"], CUSTOMER["password"])


@pytest.fixture
def admin_headers(client):
    return login_headers(client, ADMIN["email"], ADMIN["password"])


@pytest.fixture
def asgi_transport(db):
    """Routes a StorefrontAPI straight into the FastAPI app."""
    return httpx.ASGITransport(app=app)
