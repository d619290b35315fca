import os

# Settings are read on import, so the environment has to be ready first
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DB_URL"] = "sqlite://"
os.environ["USE_REDIS"] = "False"
os.environ["LOCAL"] = "True"
os.environ["TOKEN_RATE_LIMIT"] = "1000/minute"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from tutorhunt.main import app
from tutorhunt.database.database import Base, get_db
from tutorhunt.auth_tools import create_access_token

# Create a test database, one in-memory connection shared by every session
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# Override the get_db dependency to use the test database
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture()
def test_db():
    # Fresh tables for every test
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture()
def client(test_db):
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture()
def login(client):
    """Give the client a session cookie for an email"""
    def _login(email: str) -> None:
        client.cookies.set("token", create_access_token(email))
    return _login

TUTOR_PAYLOAD = {
    "name": "Maria Lopez",
    "language": "Spanish",
    "price": 25.0,
    "image": "https://example.com/maria.png",
    "description": "Conversational Spanish for beginners",
}

@pytest.fixture()
def tutor_payload():
    return dict(TUTOR_PAYLOAD)
