"""Shared pytest fixtures for wealth_api tests."""

from dataclasses import dataclass
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wealth_api.api.deps import get_inference_client
from wealth_api.core.inference import InferenceClient, InferenceConfig, InferenceError
from wealth_api.db.session import Base, get_db, init_db
from wealth_api.main import app


@dataclass
class Record:
    """Stand-in for a stored record; the aggregator only reads attributes."""
    amount: Optional[float]
    category: Optional[str] = None
    interest_rate: Optional[float] = None
    description: str = ""


class ScriptedGenerator:
    """Text generator that replays a fixed reply or raises a fixed error."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, prompt, max_tokens, temperature=None):
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeRecordStore:
    def __init__(self, assets=(), incomes=(), liabilities=(), error: Optional[Exception] = None):
        self.collections = {
            "asset": list(assets),
            "income": list(incomes),
            "liability": list(liabilities),
        }
        self.error = error
        self.fetched = []

    async def fetch_all(self, kind):
        self.fetched.append(kind.value)
        if self.error is not None:
            raise self.error
        return list(self.collections[kind.value])


@pytest.fixture
def inference_config():
    return InferenceConfig(
        provider="bedrock",
        model_id="test-model",
        region="us-test-1",
        max_tokens=1000,
        temperature=0.7,
    )


@pytest.fixture
def numbered_generator():
    return ScriptedGenerator(reply="1. Save more\n2) Invest\n3: Insure")


@pytest.fixture
def failing_generator():
    return ScriptedGenerator(error=InferenceError("connection refused"))


@pytest.fixture
def engine():
    """In-memory database shared across the connections of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def generator(numbered_generator):
    """Generator behind the app's inference client; override per test."""
    return numbered_generator


@pytest.fixture
def client(engine, inference_config, generator):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    inference_client = InferenceClient(inference_config, generator=generator)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_inference_client] = lambda: inference_client
    # Not entered as a context manager: the lifespan would touch the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, name="Alice", email="alice@example.com", password="secret123"):
    response = client.post(
        "/api/users/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return register(client)


@pytest.fixture
def bob(client):
    return register(client, name="Bob", email="bob@example.com")
