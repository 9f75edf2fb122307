from datetime import date

import pytest

from app import create_app
from config import Config
from models import db
from models.user import User, Role
from scheduling.store import SqlBookingStore
from security.password import hash_password
from tests.fakes import InMemoryBookingStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "court-admin-1"


class IsolatedConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    CREATE_TABLES = True
    BCRYPT_ROUNDS = 4
    ATTACH_PRICE_AT_BOOKING = False
    PUBLIC_AVAILABILITY_FALLBACK = "optimistic"
    ADMIN_AVAILABILITY_FALLBACK = "pessimistic"


@pytest.fixture
def day():
    return date(2026, 3, 14)


@pytest.fixture
def fake_store():
    return InMemoryBookingStore()


@pytest.fixture
def app():
    app = create_app(IsolatedConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def sql_store(app):
    return SqlBookingStore(db.session)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(email, password, roles=()):
        user = User(email=email, password_hash=hash_password(password))
        for name in roles:
            user.roles.append(Role.query.filter_by(name=name).one())
        db.session.add(user)
        db.session.commit()
        return user
    return _make


def login(client, email, password):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    # echo the double-submit token on every later request
    client.environ_base["HTTP_X_CSRF_TOKEN"] = client.get_cookie("court_csrf").value
    return resp


@pytest.fixture
def admin_client(client, make_user):
    make_user(ADMIN_EMAIL, ADMIN_PASSWORD, ["SUPER_ADMIN"])
    login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    return client


@pytest.fixture
def moderator_client(client, make_user):
    make_user("mod@example.com", "moderate-99", ["MODERATOR"])
    login(client, "mod@example.com", "moderate-99")
    return client
