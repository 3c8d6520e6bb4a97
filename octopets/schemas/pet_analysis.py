from pydantic import Field
from typing import List
from datetime import datetime, timezone
from .common import CamelModel


class PetAnalysisRequest(CamelModel):
    pet_name: str = ""
    pet_type: str = ""
    breed: str = ""
    age: int = Field(0, ge=0)
    size: str = ""            # Small, Medium, Large
    temperament_description: str = ""
    special_needs: List[str] = []
    activity_level: str = ""  # Low, Medium, High


class PetAnalysisResponse(CamelModel):
    pet_name: str = ""
    suitability_score: str = ""  # "N/10" plus a short rationale
    recommended_venue_types: List[str] = []
    venue_requirements: List[str] = []
    behavior_prediction: str = ""
    safety_considerations: List[str] = []
    recommended_amenities: List[str] = []
    general_advice: str = ""
    analysis_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class VenueRecommendationRequest(CamelModel):
    pet_type: str = ""
    breed: str = ""
    preferences: List[str] = []


class VenueRecommendationsResponse(CamelModel):
    recommendations: List[str]


class VenueDescriptionRequest(CamelModel):
    venue_name: str = ""
    venue_type: str = ""
    allowed_pets: List[str] = []


class VenueDescriptionResponse(CamelModel):
    description: str
