from fastapi import APIRouter, Depends, HTTPException, status
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase
from ..db import get_db
from ..config import get_settings
from ..schemas.listing import ListingCreate, ListingOut
from ..schemas.review import ReviewOut
from ..utils import to_id, to_object_id
import logging

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

NOT_FOUND = "Listing not found"


def require_crud() -> None:
    if not settings.enable_crud:
        raise HTTPException(status_code=403, detail="CRUD operations are disabled")


async def find_listing(db: AsyncIOMotorDatabase, listing_id: str) -> dict:
    doc = await db.listings.find_one({"_id": to_object_id(listing_id, NOT_FOUND)})
    if not doc:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return doc


def to_out(doc: dict) -> ListingOut:
    return ListingOut(**to_id(doc))


@router.get("", response_model=list[ListingOut])
async def list_listings(db: AsyncIOMotorDatabase = Depends(get_db)):
    docs = await db.listings.find().sort([("created_at", 1), ("_id", 1)]).to_list(None)
    return [to_out(d) for d in docs]


@router.get("/{listing_id}", response_model=ListingOut)
async def get_listing(listing_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return to_out(await find_listing(db, listing_id))


@router.post("", response_model=ListingOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_crud)])
async def create_listing(payload: ListingCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    doc = payload.model_dump()
    doc["rating"] = 0.0
    doc["reviews"] = []
    doc["created_at"] = datetime.utcnow()
    res = await db.listings.insert_one(doc)
    doc["_id"] = res.inserted_id
    logger.info(f"Listing created: {doc['name']} ({res.inserted_id})")
    return to_out(doc)


@router.get("/{listing_id}/reviews", response_model=list[ReviewOut])
async def list_listing_reviews(listing_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    listing = await find_listing(db, listing_id)
    return [ReviewOut(**r) for r in listing.get("reviews", [])]
