"""
Pet analysis gateway.

Wraps the OpenAI chat-completion API for three tasks: venue compatibility
analysis, venue-type recommendations and venue marketing copy. One provider
call per request, no retries. Any failure is replaced by a fixed fallback
value, and the result says so (``GatewayResult.degraded``) so callers can
tell a real answer from a canned one.
"""
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from openai import AsyncOpenAI

from ..config import Settings, get_settings
from ..schemas.pet_analysis import PetAnalysisRequest, PetAnalysisResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERVICE_NAME = "OpenAI Pet Analysis Service"

DEFAULT_SUITABILITY_SCORE = "5/10 - Unable to analyze"
DEFAULT_BEHAVIOR_PREDICTION = "Behavior prediction unavailable"
DEFAULT_GENERAL_ADVICE = "Consult with venue staff about pet policies"

FALLBACK_SUITABILITY_SCORE = "Unable to analyze - please try again later"
FALLBACK_RECOMMENDATIONS = ["Dog parks", "Pet-friendly cafes", "Outdoor restaurants"]

ANALYSIS_SYSTEM_PROMPT = """You are a professional pet behavior analyst specializing in venue compatibility assessment.
Analyze the provided pet details and provide structured recommendations for pet-friendly venues.
Focus on safety, compatibility, and the pet's specific needs.

Respond with a JSON object containing:
- suitabilityScore: A score from 1-10 with brief explanation
- recommendedVenueTypes: Array of suitable venue types (e.g., 'dog park', 'pet cafe', 'outdoor restaurant')
- venueRequirements: Array of specific requirements the venue should have
- behaviorPrediction: Brief prediction of how the pet might behave in social venues
- safetyConsiderations: Array of safety concerns to consider
- recommendedAmenities: Array of amenities that would benefit this pet
- generalAdvice: General advice for the pet owner when visiting venues"""

RECOMMENDATION_SYSTEM_PROMPT = """You are a pet venue recommendation expert. Based on the pet type, breed, and owner preferences,
recommend specific types of venues that would be ideal. Return a JSON array of venue type recommendations."""

DESCRIPTION_SYSTEM_PROMPT = """You are a marketing copywriter specializing in pet-friendly venues.
Create engaging, welcoming descriptions that highlight pet-friendly features."""

# Synthetic pet used when the health check runs a full analysis
HEALTH_CHECK_PET = PetAnalysisRequest(
    pet_name="Test",
    pet_type="Dog",
    breed="Test Breed",
    age=1,
    size="Small",
    temperament_description="Friendly",
    activity_level="Medium",
)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


class PetAnalysisError(Exception):
    """The provider could not be reached or its reply could not be used."""


@dataclass
class GatewayResult(Generic[T]):
    value: T
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "GatewayResult[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "GatewayResult[T]":
        return cls(value=value, degraded=True, reason=reason)


def fallback_analysis(pet_name: str) -> PetAnalysisResponse:
    return PetAnalysisResponse(
        pet_name=pet_name,
        suitability_score=FALLBACK_SUITABILITY_SCORE,
        recommended_venue_types=["Contact venue directly for pet policy information"],
        venue_requirements=["Verify pet-friendly status before visiting"],
        behavior_prediction="Analysis unavailable",
        safety_considerations=["Always supervise your pet", "Bring necessary supplies"],
        recommended_amenities=["Water bowls", "Pet waste stations"],
        general_advice="Service temporarily unavailable. Please consult with venue staff about their pet policies.",
    )


def fallback_description(venue_name: str, allowed_pets: List[str]) -> str:
    return (
        f"{venue_name} welcomes {' and '.join(allowed_pets)} "
        "and provides a comfortable environment for pets and their owners."
    )


def build_analysis_prompt(request: PetAnalysisRequest) -> str:
    return (
        "Pet Details:\n"
        f"Name: {request.pet_name}\n"
        f"Type: {request.pet_type}\n"
        f"Breed: {request.breed}\n"
        f"Age: {request.age} years old\n"
        f"Size: {request.size}\n"
        f"Temperament: {request.temperament_description}\n"
        f"Special Needs: {', '.join(request.special_needs)}\n"
        f"Activity Level: {request.activity_level}"
    )


def parse_json_reply(content: str) -> Any:
    text = content.strip()
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PetAnalysisError("Failed to parse AI response") from e


def _get_str(data: Any, key: str, default: str) -> str:
    # present-but-empty strings are kept as the model sent them
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    return value if isinstance(value, str) else default


def _get_str_list(data: Any, key: str) -> List[str]:
    if not isinstance(data, dict):
        return []
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def analysis_from_reply(pet_name: str, data: Any) -> PetAnalysisResponse:
    """Each field is read on its own; a bad field gets its default, not a failure."""
    return PetAnalysisResponse(
        pet_name=pet_name,
        suitability_score=_get_str(data, "suitabilityScore", DEFAULT_SUITABILITY_SCORE),
        recommended_venue_types=_get_str_list(data, "recommendedVenueTypes"),
        venue_requirements=_get_str_list(data, "venueRequirements"),
        behavior_prediction=_get_str(data, "behaviorPrediction", DEFAULT_BEHAVIOR_PREDICTION),
        safety_considerations=_get_str_list(data, "safetyConsiderations"),
        recommended_amenities=_get_str_list(data, "recommendedAmenities"),
        general_advice=_get_str(data, "generalAdvice", DEFAULT_GENERAL_ADVICE),
    )


class PetAnalysisGateway:
    mock = False

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
        health_mode: str = "models",
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.health_mode = health_mode
        self._client = client
        self.last_analysis: Optional[datetime] = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise PetAnalysisError("OpenAI API key not configured")
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    async def _complete(self, system: str, user: str, temperature: float, max_tokens: int) -> str:
        client = self._get_client()
        chat = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = (chat.choices[0].message.content or "") if chat and chat.choices else ""
        if not content.strip():
            raise PetAnalysisError("Empty reply from completion provider")
        return content

    async def analyze(self, request: PetAnalysisRequest) -> GatewayResult[PetAnalysisResponse]:
        try:
            content = await self._complete(
                ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt(request), temperature=0.7, max_tokens=1000
            )
            analysis = analysis_from_reply(request.pet_name, parse_json_reply(content))
        except Exception as e:
            logger.error(f"Error analyzing pet for venue compatibility: {e}", exc_info=True)
            return GatewayResult.fallback(fallback_analysis(request.pet_name), str(e))

        self.last_analysis = analysis.analysis_date
        logger.info(f"Analysis completed for {request.pet_name!r}")
        return GatewayResult.ok(analysis)

    async def recommend_venues(
        self, pet_type: str, breed: str, preferences: List[str]
    ) -> GatewayResult[List[str]]:
        user = (
            f"Pet Type: {pet_type}\n"
            f"Breed: {breed}\n"
            f"Owner Preferences: {', '.join(preferences)}\n\n"
            "Provide an array of specific venue recommendations."
        )
        try:
            content = await self._complete(RECOMMENDATION_SYSTEM_PROMPT, user, temperature=0.8, max_tokens=300)
            data = parse_json_reply(content)
            if data is None:
                data = []
            if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
                raise PetAnalysisError("Expected a JSON array of strings")
        except Exception as e:
            logger.error(f"Error generating venue recommendations: {e}", exc_info=True)
            return GatewayResult.fallback(list(FALLBACK_RECOMMENDATIONS), str(e))
        return GatewayResult.ok(data)

    async def generate_venue_description(
        self, venue_name: str, venue_type: str, allowed_pets: List[str]
    ) -> GatewayResult[str]:
        user = (
            f"Venue Name: {venue_name}\n"
            f"Venue Type: {venue_type}\n"
            f"Allowed Pets: {', '.join(allowed_pets)}\n\n"
            "Write a brief, engaging description (2-3 sentences) that highlights why this venue is great for pet owners."
        )
        try:
            content = await self._complete(DESCRIPTION_SYSTEM_PROMPT, user, temperature=0.9, max_tokens=200)
        except Exception as e:
            logger.error(f"Error generating pet-friendly description: {e}", exc_info=True)
            return GatewayResult.fallback(fallback_description(venue_name, allowed_pets), str(e))
        return GatewayResult.ok(content.strip())

    async def health_check(self) -> GatewayResult[Optional[datetime]]:
        """
        ``models`` lists the provider's models, which costs nothing.
        ``analyze`` runs a full analysis on a synthetic pet.
        The value is the timestamp of the last genuine analysis.
        """
        if self.health_mode == "analyze":
            result = await self.analyze(HEALTH_CHECK_PET)
            if result.degraded:
                return GatewayResult.fallback(self.last_analysis, result.reason or "analysis failed")
            return GatewayResult.ok(result.value.analysis_date)

        try:
            await self._get_client().models.list()
        except Exception as e:
            logger.error(f"Pet analysis health check failed: {e}", exc_info=True)
            return GatewayResult.fallback(self.last_analysis, str(e))
        return GatewayResult.ok(self.last_analysis)


class MockPetAnalysisGateway:
    """Offline stand-in with the sample answers the web client shows in mock mode."""
    mock = True

    def __init__(self):
        self.last_analysis: Optional[datetime] = None

    async def analyze(self, request: PetAnalysisRequest) -> GatewayResult[PetAnalysisResponse]:
        analysis = PetAnalysisResponse(
            pet_name=request.pet_name,
            suitability_score="8/10 - Great venue companion with proper preparation",
            recommended_venue_types=["dog parks", "pet-friendly cafes", "outdoor restaurants"],
            venue_requirements=["secure fencing", "water stations", "pet waste facilities"],
            behavior_prediction="Likely to be well-behaved with proper socialization",
            safety_considerations=["Monitor interactions with other pets", "Bring water and treats"],
            recommended_amenities=["water bowls", "pet waste stations", "shaded areas"],
            general_advice="Start with shorter visits to help your pet adjust to new environments",
        )
        self.last_analysis = analysis.analysis_date
        return GatewayResult.ok(analysis)

    async def recommend_venues(self, pet_type: str, breed: str, preferences: List[str]) -> GatewayResult[List[str]]:
        return GatewayResult.ok([
            "Dog-friendly breweries",
            "Outdoor cafes with patio seating",
            "Pet supply stores with play areas",
            "Walking trails and parks",
            "Pet-friendly hotels for travel",
        ])

    async def generate_venue_description(
        self, venue_name: str, venue_type: str, allowed_pets: List[str]
    ) -> GatewayResult[str]:
        return GatewayResult.ok(
            f"{venue_name} is a welcoming {venue_type} that happily accommodates {' and '.join(allowed_pets)}. "
            "Our pet-friendly environment ensures both you and your furry companions feel right at home."
        )

    async def health_check(self) -> GatewayResult[Optional[datetime]]:
        return GatewayResult.ok(self.last_analysis)


_gateway = None


def build_gateway(settings: Settings):
    if settings.use_mock_data:
        return MockPetAnalysisGateway()
    return PetAnalysisGateway(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout=settings.openai_timeout_seconds,
        health_mode=settings.pet_analysis_health_mode,
    )


def get_pet_analysis_gateway():
    global _gateway
    if _gateway is None:
        _gateway = build_gateway(get_settings())
    return _gateway
