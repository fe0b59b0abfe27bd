import copy
import json
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from trip_planner.api import app, get_itinerary_service, get_store
from trip_planner.auth.session import SessionProvider
from trip_planner.config import Settings
from trip_planner.integrations.mongo_client import TripStore
from trip_planner.planner.service import ItineraryService

EXAMPLE_PLAN = {
    "hotels": [
        {"name": "Hotel Le Marais", "description": "Boutique stay near Place des Vosges", "price_range": "$180-240/night", "rating": "4.6/5", "tips": "Ask for a courtyard room"},
        {"name": "Generator Paris", "description": "Design hostel by Canal Saint-Martin", "price_range": "$60-90/night", "rating": "4.2/5", "tips": "Private rooms sell out early"},
        {"name": "Hotel Lutetia", "description": "Art deco palace in Saint-Germain", "price_range": "$650-900/night", "rating": "4.8/5", "tips": "Book the spa in advance"},
    ],
    "places_to_visit": [
        {"name": "Louvre Museum", "description": "World's largest art museum", "price_range": "$22", "rating": "4.7/5", "tips": "Use the Carrousel entrance"},
        {"name": "Montmartre", "description": "Hilltop village with Sacré-Cœur", "price_range": "Free", "rating": "4.6/5", "tips": "Go at sunrise"},
    ],
    "food_places": [
        {"name": "Le Comptoir du Relais", "description": "Classic bistro in Odéon", "price_range": "$40-70", "rating": "4.5/5", "tips": "Lunch needs no reservation"},
    ],
    "attractions": [
        {"name": "Eiffel Tower", "description": "Iron lattice landmark", "price_range": "$20-35", "rating": "4.6/5", "tips": "Take the stairs to level two"},
    ],
    "transportation": [
        {"name": "Metro", "description": "Fast citywide subway", "price": "$2.30 per ride", "tips": "Buy a Navigo Easy card"},
        {"name": "Taxi", "description": "Flat rate from CDG", "price": "$60", "tips": "Use the official rank"},
    ],
    "hidden_gems": [
        {"name": "Musée de la Vie Romantique", "description": "Quiet garden café", "price_range": "Free", "rating": "4.5/5", "tips": "Visit on weekdays"},
    ],
    "tips": [
        {"name": "General Tip", "description": "Many museums close on Mondays or Tuesdays", "tips": "Check opening days"},
    ],
    "budget_per_person": "$1500-2000 for the entire trip",
    "best_time_to_visit": "April to June",
}


def chat_completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "google/gemini-2.5-flash",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class GatewayStub:
    """Stands in for the chat-completion gateway and records every request."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.content = json.dumps(EXAMPLE_PLAN)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"message": "upstream failure"}})
        return httpx.Response(200, json=chat_completion(self.content))

    @property
    def calls(self):
        return len(self.requests)

    def last_body(self):
        return json.loads(self.requests[-1].content)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        return FakeCursor(sorted(self.docs, key=lambda d: d[key], reverse=direction == DESCENDING))

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """In-memory double for the handful of pymongo Collection calls TripStore makes."""

    def __init__(self):
        self.docs = []
        self.fail_writes = False

    @staticmethod
    def _matches(doc, flt):
        return all(doc.get(k) == v for k, v in flt.items())

    def insert_one(self, doc):
        if self.fail_writes:
            raise PyMongoError("write failed")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, flt):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if self._matches(d, flt)])

    def find_one(self, flt):
        for d in self.docs:
            if self._matches(d, flt):
                return copy.deepcopy(d)
        return None

    def delete_one(self, flt):
        for i, d in enumerate(self.docs):
            if self._matches(d, flt):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)


@pytest.fixture
def settings():
    return Settings(gateway_url="https://gateway.test/v1", timeout=5.0)


@pytest.fixture
def gateway():
    return GatewayStub()


@pytest.fixture
def service(settings, gateway):
    return ItineraryService(settings, gateway.http_client())


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return TripStore(collection)


@pytest.fixture
def client(service, store):
    app.state.sessions = SessionProvider()
    app.dependency_overrides[get_itinerary_service] = lambda: service
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    resp = client.post("/auth/sign-in", json={"email": "traveler@example.com"})
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
