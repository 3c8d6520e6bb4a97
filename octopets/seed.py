"""
Sample venues loaded into an empty store, the same kind of data the web
client ships for its offline mode.
"""
from datetime import datetime
from typing import Any, Dict, List
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from .utils import average_rating
import logging

logger = logging.getLogger(__name__)

SAMPLE_LISTINGS: List[Dict[str, Any]] = [
    {
        "name": "Pawsome Park",
        "description": "A spacious fenced park with separate areas for large and small dogs.",
        "type": "park",
        "location": "123 Park Avenue, Seattle, WA",
        "allowed_pets": ["dogs"],
        "amenities": ["water bowls", "waste stations", "shade", "fenced area"],
        "photos": ["/images/parks/pawsome-park.jpg"],
        "contact_info": {"phone": "(206) 555-0101", "email": "info@pawsomepark.example", "website": "https://pawsomepark.example"},
        "reviews": [
            {"user_id": "u1", "user_name": "Jamie", "rating": 5, "comment": "My lab loves it here!", "date": "2025-03-15"},
            {"user_id": "u2", "user_name": "Priya", "rating": 4, "comment": "Great space, gets busy on weekends.", "date": "2025-04-02"},
        ],
    },
    {
        "name": "The Whisker Cafe",
        "description": "Cozy cafe with a patio where leashed dogs and cats in carriers are welcome.",
        "type": "cafe",
        "location": "45 Pine Street, Seattle, WA",
        "allowed_pets": ["dogs", "cats"],
        "amenities": ["pet treats", "water bowls", "outdoor seating"],
        "photos": ["/images/cafes/whisker-cafe.jpg"],
        "contact_info": {"phone": "(206) 555-0142", "email": "hello@whiskercafe.example", "website": "https://whiskercafe.example"},
        "reviews": [
            {"user_id": "u3", "user_name": "Alex", "rating": 5, "comment": "Free puppuccinos!", "date": "2025-02-20"},
        ],
    },
    {
        "name": "Harbor View Hotel",
        "description": "Waterfront hotel with pet-friendly rooms and a nearby walking trail.",
        "type": "hotel",
        "location": "900 Alaskan Way, Seattle, WA",
        "allowed_pets": ["dogs", "cats", "small mammals"],
        "amenities": ["pet beds", "walking trail", "pet sitting"],
        "photos": ["/images/hotels/harbor-view.jpg"],
        "contact_info": {"phone": "(206) 555-0199", "email": "stay@harborview.example", "website": "https://harborview.example"},
        "reviews": [],
    },
]


def build_listing_doc(sample: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(sample)
    doc["reviews"] = [dict(r, id=str(ObjectId())) for r in sample.get("reviews", [])]
    doc["rating"] = average_rating(doc["reviews"])
    doc["created_at"] = datetime.utcnow()
    return doc


async def seed_listings(db: AsyncIOMotorDatabase) -> int:
    """Inserts the sample listings if the collection is empty. Returns how many were inserted."""
    if await db.listings.count_documents({}) > 0:
        return 0
    docs = [build_listing_doc(s) for s in SAMPLE_LISTINGS]
    await db.listings.insert_many(docs)
    logger.info(f"Seeded {len(docs)} sample listings")
    return len(docs)
