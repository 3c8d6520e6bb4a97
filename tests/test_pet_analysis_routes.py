"""
Tests for the /pet-analysis endpoints
"""
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from octopets.main import app
from octopets.middleware.rate_limit import limiter, PET_ANALYSIS_LIMIT
from octopets.services.pet_analysis import MockPetAnalysisGateway, PetAnalysisGateway, get_pet_analysis_gateway


def test_analyze_with_stubbed_provider(client, stub_openai, rex_request):
    stub_openai.completions.reply = '{"suitabilityScore":"9/10","recommendedVenueTypes":["dog park"]}'

    response = client.post("/pet-analysis/analyze", json=rex_request)

    assert response.status_code == status.HTTP_200_OK
    assert "X-Pet-Analysis-Degraded" not in response.headers
    data = response.json()
    assert data["petName"] == "Rex"
    assert data["suitabilityScore"] == "9/10"
    assert data["recommendedVenueTypes"] == ["dog park"]
    assert data["venueRequirements"] == []
    assert data["safetyConsiderations"] == []
    assert data["recommendedAmenities"] == []
    assert data["behaviorPrediction"] == "Behavior prediction unavailable"
    assert data["generalAdvice"] == "Consult with venue staff about pet policies"
    assert "analysisDate" in data


def test_analyze_fallback_is_flagged(client, stub_openai, rex_request):
    stub_openai.completions.error = RuntimeError("upstream 500")

    response = client.post("/pet-analysis/analyze", json=rex_request)

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["X-Pet-Analysis-Degraded"] == "true"
    assert response.headers["X-Pet-Analysis-Degraded-Reason"] == "upstream 500"
    data = response.json()
    assert data["petName"] == "Rex"
    assert data["suitabilityScore"] == "Unable to analyze - please try again later"
    assert data["generalAdvice"].startswith("Service temporarily unavailable")


@pytest.mark.parametrize("field", ["petName", "petType"])
@pytest.mark.parametrize("value", ["", "   "])
def test_analyze_requires_name_and_type(client, stub_openai, rex_request, field, value):
    rex_request[field] = value
    response = client.post("/pet-analysis/analyze", json=rex_request)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Pet name and type are required"
    assert stub_openai.completions.calls == []


def test_recommendations(client, stub_openai):
    stub_openai.completions.reply = '["Dog beaches"]'
    response = client.post("/pet-analysis/recommendations",
                           json={"petType": "Dog", "breed": "Husky", "preferences": ["outdoors"]})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"recommendations": ["Dog beaches"]}


def test_recommendations_requires_pet_type(client):
    response = client.post("/pet-analysis/recommendations", json={"petType": " ", "breed": "Husky"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Pet type is required"


def test_recommendations_fallback(client, stub_openai):
    stub_openai.completions.reply = "not json"
    response = client.post("/pet-analysis/recommendations", json={"petType": "Dog"})
    assert response.json() == {"recommendations": ["Dog parks", "Pet-friendly cafes", "Outdoor restaurants"]}
    assert response.headers["X-Pet-Analysis-Degraded"] == "true"


def test_venue_description(client, stub_openai):
    stub_openai.completions.reply = "  Cozy and welcoming.  "
    response = client.post("/pet-analysis/venue-description",
                           json={"venueName": "Paws Cafe", "venueType": "cafe", "allowedPets": ["dogs"]})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"description": "Cozy and welcoming."}


@pytest.mark.parametrize("body", [
    {"venueName": "", "venueType": "cafe"},
    {"venueName": "Paws Cafe", "venueType": ""},
])
def test_venue_description_requires_name_and_type(client, body):
    response = client.post("/pet-analysis/venue-description", json=body)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Venue name and type are required"


def test_health_healthy(client):
    response = client.get("/pet-analysis/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "Healthy"
    assert data["service"] == "OpenAI Pet Analysis Service"
    assert "timestamp" in data
    assert data["lastAnalysis"] is None


def test_health_reports_last_analysis(client, stub_openai, rex_request):
    stub_openai.completions.reply = "{}"
    client.post("/pet-analysis/analyze", json=rex_request)
    assert client.get("/pet-analysis/health").json()["lastAnalysis"] is not None


def test_health_unhealthy_when_provider_unreachable(client, stub_openai):
    stub_openai.models.error = ConnectionError("connection refused")
    response = client.get("/pet-analysis/health")
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    data = response.json()
    assert data["status"] == "Unhealthy"
    assert data["error"] == "connection refused"


def test_health_unhealthy_without_api_key():
    app.dependency_overrides[get_pet_analysis_gateway] = lambda: PetAnalysisGateway(api_key="")
    try:
        response = TestClient(app).get("/pet-analysis/health")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["status"] == "Unhealthy"
    assert response.json()["error"] == "OpenAI API key not configured"


def test_health_catches_gateway_exceptions(gateway):
    async def broken():
        raise RuntimeError("gateway exploded")

    gateway.health_check = broken
    app.dependency_overrides[get_pet_analysis_gateway] = lambda: gateway
    try:
        response = TestClient(app).get("/pet-analysis/health")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["error"] == "gateway exploded"


def test_mock_mode(rex_request):
    app.dependency_overrides[get_pet_analysis_gateway] = MockPetAnalysisGateway
    try:
        c = TestClient(app)
        analysis = c.post("/pet-analysis/analyze", json=rex_request).json()
        health = c.get("/pet-analysis/health").json()
    finally:
        app.dependency_overrides.clear()
    assert analysis["suitabilityScore"] == "8/10 - Great venue companion with proper preparation"
    assert health["status"] == "Healthy (Mock Mode)"


def test_rate_limit(client, stub_openai, rex_request):
    stub_openai.completions.reply = "{}"
    allowed = int(PET_ANALYSIS_LIMIT.split("/")[0])
    limiter.enabled = True
    limiter.reset()

    codes = [client.post("/pet-analysis/analyze", json=rex_request).status_code for _ in range(allowed + 1)]

    limiter.reset()
    assert codes[:allowed] == [200] * allowed
    assert codes[allowed] == status.HTTP_429_TOO_MANY_REQUESTS
