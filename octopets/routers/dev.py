# octopets/routers/dev.py
# /dev/seed-data is mounted only when APP_ENV=dev; /dev/info in every environment
import os
import platform
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from ..config import get_settings
from ..db import get_db
from ..seed import seed_listings

router = APIRouter()
info_router = APIRouter()
settings = get_settings()


@router.post("/seed-data")
async def seed_data(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Loads the sample venues into an empty store.
    Does nothing when listings already exist.
    """
    inserted = await seed_listings(db)
    return {"inserted": inserted}


@info_router.get("/info")
async def debug_info():
    return {
        "environment": settings.env,
        "is_production": settings.env == "production",
        "is_development": settings.env == "dev",
        "machine_name": platform.node(),
        "os_version": f"{platform.system()} {platform.release()}",
        "pid": os.getpid(),
    }
