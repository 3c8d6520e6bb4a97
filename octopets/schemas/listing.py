from pydantic import Field
from typing import List
from .common import CamelModel
from .review import ReviewOut


class ContactInfo(CamelModel):
    phone: str = ""
    email: str = ""
    website: str = ""


class ListingCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, max_length=40)  # park, cafe, home, hotel, custom...
    location: str = Field(..., min_length=1)
    allowed_pets: List[str] = []
    amenities: List[str] = []
    photos: List[str] = []
    contact_info: ContactInfo = ContactInfo()


class ListingOut(ListingCreate):
    id: str
    rating: float = 0
    reviews: List[ReviewOut] = []
