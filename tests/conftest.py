"""
pytest configuration
"""
import pytest
from types import SimpleNamespace
from fastapi.testclient import TestClient

from octopets.main import app
from octopets.config import get_settings
from octopets.db import reset_db
from octopets.middleware.rate_limit import limiter
from octopets.services.pet_analysis import PetAnalysisGateway, get_pet_analysis_gateway


class StubCompletions:
    """Stands in for client.chat.completions; records every call."""

    def __init__(self):
        self.reply = ""
        self.error = None
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class StubModels:
    def __init__(self):
        self.error = None
        self.calls = 0

    async def list(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(id="gpt-4o-mini")])


class StubOpenAI:
    def __init__(self):
        self.completions = StubCompletions()
        self.chat = SimpleNamespace(completions=self.completions)
        self.models = StubModels()


@pytest.fixture(autouse=True)
def disable_rate_limiting():
    """Disables rate limiting for every test"""
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous


@pytest.fixture(autouse=True)
def clean_db():
    """Each test starts from an empty in-memory store"""
    reset_db()
    yield
    reset_db()


@pytest.fixture
def settings():
    """Settings singleton; flags changed in a test are restored afterwards"""
    s = get_settings()
    saved = s.model_dump()
    yield s
    for key, value in saved.items():
        setattr(s, key, value)


@pytest.fixture
def stub_openai():
    return StubOpenAI()


@pytest.fixture
def gateway(stub_openai):
    return PetAnalysisGateway(api_key="test-key", client=stub_openai)


@pytest.fixture
def client(gateway):
    """FastAPI test client with the gateway wired to the stub provider"""
    app.dependency_overrides[get_pet_analysis_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def listing_data():
    return {
        "name": "Bark Park",
        "description": "Off-leash park with agility equipment",
        "type": "park",
        "location": "10 Elm Street, Portland, OR",
        "allowedPets": ["dogs"],
        "amenities": ["water bowls", "fenced area"],
        "photos": [],
        "contactInfo": {"phone": "555-0100", "email": "park@example.com", "website": ""},
    }


@pytest.fixture
def rex_request():
    return {
        "petName": "Rex",
        "petType": "Dog",
        "breed": "Labrador",
        "age": 3,
        "size": "Large",
        "temperamentDescription": "Friendly and energetic",
        "specialNeeds": [],
        "activityLevel": "High",
    }
