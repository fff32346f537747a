"""Shared fixtures."""

import pytest

from packetjourney.identity.models import GUEST_IDENTITY, Identity, IdentityRole
from packetjourney.quests.catalog import parse_quest
from packetjourney.storage.database import Database
from packetjourney.storage.progress import ProgressTracker


@pytest.fixture
def player() -> Identity:
    return Identity(id="user-1", username="ada", email="ada@example.com", role=IdentityRole.PLAYER)


@pytest.fixture
def guest() -> Identity:
    return GUEST_IDENTITY


@pytest.fixture
def tracker() -> ProgressTracker:
    return ProgressTracker()


@pytest.fixture
def two_layer_quest():
    """Method question, then a status code question."""
    return parse_quest(
        {
            "id": "q-two",
            "name": "Two Steps",
            "description": "Fetch, then read the status",
            "difficulty": 1,
            "layers": [
                {
                    "type": "BROWSER",
                    "order": 0,
                    "challenge": {
                        "type": "SELECT_METHOD",
                        "config": {
                            "question": "Which method fetches data?",
                            "options": ["GET", "POST", "PUT", "DELETE"],
                            "answer": "GET",
                        },
                    },
                },
                {
                    "type": "API",
                    "order": 1,
                    "challenge": {
                        "type": "STATUS_CODE_MATCH",
                        "config": {
                            "scenario": "The resource does not exist.",
                            "statusCodes": [200, 404, 500],
                            "correctCode": 404,
                        },
                    },
                },
            ],
        }
    )


@pytest.fixture
def single_layer_quest():
    return parse_quest(
        {
            "id": "q-one",
            "title": "One Step",
            "layers": [
                {
                    "index": 0,
                    "challenge": {
                        "type": "PICK_ENDPOINT",
                        "question": "Which endpoint greets you?",
                        "options": ["/api/hello", "/api/users"],
                        "answer": "/api/hello",
                    },
                }
            ],
        }
    )


@pytest.fixture
async def db():
    database = Database(":memory:")
    await database.connect()
    yield database
    await database.close()
