import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from core.db import Base, enable_sqlite_foreign_keys, get_db
from core import config as core_config
from models.product import Product
from models.user import ROLE_ADMIN, ROLE_USER, User
from security.password import hash_password
from security import jwt as jwt_utils


@pytest.fixture(scope="session", autouse=True)
def test_settings():
    core_config.settings.JWT_SECRET = "test-secret"
    core_config.settings.TESTING = True
    yield


@pytest.fixture()
def db_session_override():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    def _get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db
    try:
        yield db
    finally:
        db.close()
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db(db_session_override):
    return db_session_override


@pytest.fixture()
def client(db_session_override):
    with TestClient(app) as c:
        yield c


def _make_user(db, email: str, role: str) -> User:
    user = User(email=email, password_hash=hash_password("testpass123"), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db):
    """Create an admin user."""
    return _make_user(db, "admin@example.com", ROLE_ADMIN)


@pytest.fixture
def regular_user(db):
    """Create a non-admin user."""
    return _make_user(db, "user@example.com", ROLE_USER)


def _headers_for(user: User) -> dict:
    token = jwt_utils.create_access_token(str(user.id), {"email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return _headers_for(admin_user)


@pytest.fixture
def auth_headers(regular_user):
    return _headers_for(regular_user)


@pytest.fixture
def make_product(db):
    """Factory for catalogue products."""
    def _make(stock: int = 3, title: str = "Widget", price: float = 100, product_id: int | None = None) -> Product:
        product = Product(id=product_id, title=title, price=price, stock=stock)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make
