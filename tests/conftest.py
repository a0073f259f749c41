"""
Pytest configuration and shared fixtures.
The API runs against an in-memory mongomock database instead of a live server.
"""

import sys
from pathlib import Path

import mongomock
import pytest
from fastapi.testclient import TestClient

# Add project root to sys.path so the top-level modules import
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import config  # noqa: E402
import database  # noqa: E402
from auth import create_access_token  # noqa: E402
from database import MongoDatabase, get_mongo  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture
def mongo(monkeypatch):
    monkeypatch.setattr(database, "MongoClient", mongomock.MongoClient)
    mongo = MongoDatabase(config.DATABASE_URL, config.DATABASE_NAME)
    mongo.connect()
    yield mongo
    mongo.db.client.drop_database(config.DATABASE_NAME)
    mongo.close()


@pytest.fixture
def db(mongo):
    return mongo.db


@pytest.fixture
def client(mongo):
    app.dependency_overrides[get_mongo] = lambda: mongo
    # https so the Secure cookie is sent back
    yield TestClient(app, base_url="https://testserver")
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Put a credential for the given email in the client's cookie jar."""

    def _login(email: str = "donor@mail.com", **claims):
        token = create_access_token({"email": email, **claims})
        client.cookies.set(config.TOKEN_COOKIE_NAME, token)
        return token

    return _login


def make_food(**overrides) -> dict:
    food = {
        "FoodName": "Apple Pie",
        "FoodImage": "https://img.mail.com/pie.png",
        "FoodQuantity": 4,
        "PickupLocation": "12 Baker Street",
        "ExpiredDateTime": "2026-10-21T18:00:00",
        "AdditionalNotes": "Still warm",
        "Donator": {"Image": None, "Name": "Dana", "Email": "donor@mail.com"},
    }
    food.update(overrides)
    return food


def make_request(**overrides) -> dict:
    request = {
        "FoodId": "652f1c2e9b1e8a3d4c5b6a70",
        "Requester": {"Email": "taker@mail.com", "Name": "Tom"},
        "Status": "pending",
        "RequestNotes": "After 5pm",
    }
    request.update(overrides)
    return request
