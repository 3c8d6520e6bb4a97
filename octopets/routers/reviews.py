import asyncio
from collections import defaultdict
from datetime import datetime
from typing import Dict
from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from ..db import get_db
from ..schemas.review import ReviewCreate, ReviewOut
from ..utils import average_rating
from .listings import find_listing, require_crud
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# One writer per listing: append + rating recompute must not interleave
_listing_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)


@router.get("/{review_id}", response_model=ReviewOut)
async def get_review(review_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    listing = await db.listings.find_one({"reviews.id": review_id})
    if listing:
        for r in listing.get("reviews", []):
            if r.get("id") == review_id:
                return ReviewOut(**r)
    raise HTTPException(status_code=404, detail="Review not found")


@router.post("/by-listing/{listing_id}", response_model=ReviewOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_crud)])
async def create_review(listing_id: str,
                        payload: ReviewCreate,
                        db: AsyncIOMotorDatabase = Depends(get_db)):
    listing = await find_listing(db, listing_id)
    now = datetime.utcnow()
    review = {
        "id": str(ObjectId()),
        "user_id": payload.user_id,
        "user_name": payload.user_name.strip(),
        "rating": payload.rating,
        "comment": (payload.comment or "").strip(),
        "date": now.date().isoformat(),
        "created_at": now,
    }

    async with _listing_locks[str(listing["_id"])]:
        await db.listings.update_one({"_id": listing["_id"]}, {"$push": {"reviews": review}})
        updated = await db.listings.find_one({"_id": listing["_id"]})
        if not updated:
            raise HTTPException(status_code=404, detail="Listing not found")
        rating = average_rating(updated.get("reviews", []))
        await db.listings.update_one({"_id": listing["_id"]}, {"$set": {"rating": rating}})

    logger.info(f"Review {review['id']} added to listing {listing_id}; rating now {rating:.2f}")
    return ReviewOut(**review)
