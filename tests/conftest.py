"""
Pytest configuration and fixtures for the ContaPyme API tests.

The environment is set before the application is imported so the engine is
built against an in-memory SQLite database, with file logging and the
scheduler switched off.
"""

import os

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['LOG_TO_FILE'] = 'false'
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['SCHEDULER_ENABLED'] = 'false'
os.environ['SUPABASE_JWT_SECRET'] = 'test-secret'

import pytest
from fastapi.testclient import TestClient

from contapyme.auth import ACCESS_COOKIE, create_access_token, hash_password
from contapyme.database import Base, SessionLocal, engine
from contapyme.main import app
from contapyme.models.users import User

TEST_PASSWORD = "clave-secreta-123"  # must match the login helper in test_auth


@pytest.fixture(autouse=True)
def setup_database():
    """Recreate the schema around every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user(db_session):
    db_user = User(
        email="contador@pyme.cl",
        full_name="María González",
        hashed_password=hash_password(TEST_PASSWORD),
        role="CLIENT",
        subscription_plan="monthly",
        subscription_status="trial",
        max_companies=1,
    )
    db_session.add(db_user)
    db_session.commit()
    db_session.refresh(db_user)
    return db_user


@pytest.fixture
def auth_client(client, user):
    """A client already carrying a valid session cookie for ``user``."""
    client.cookies.set(ACCESS_COOKIE, create_access_token(user))
    return client
