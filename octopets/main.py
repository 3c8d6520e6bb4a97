from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from .config import get_settings
from .db import get_db
from .middleware.rate_limit import limiter
from .routers import listings, reviews, pet_analysis, dev
from .seed import seed_listings
import logging
import uvicorn

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_data:
        try:
            await seed_listings(await get_db())
        except Exception as e:
            # the API still serves an empty store
            logger.error(f"Error seeding sample data: {e}", exc_info=True)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    if settings.errors:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": "Internal server error"}
    return JSONResponse(status_code=500, content=content)


# CORS by environment
if settings.env == "dev":
    # the React dev server runs on 3000 by default
    cors_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_regex = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"
else:
    frontend_url = settings.frontend_base_url
    cors_origins = [frontend_url] if frontend_url else []
    cors_regex = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_origin_regex=cors_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    expose_headers=["Content-Type", pet_analysis.DEGRADED_HEADER, pet_analysis.DEGRADED_REASON_HEADER],
)


@app.get("/health")
async def health():
    return {"status": "Healthy", "timestamp": datetime.now(timezone.utc)}


# Routers
app.include_router(listings.router, prefix="/listings", tags=["listings"])
app.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
app.include_router(pet_analysis.router, prefix="/pet-analysis", tags=["pet-analysis"])

app.include_router(dev.info_router, prefix="/dev", tags=["dev"])

# Development endpoints (dev only)
if settings.env == "dev":
    app.include_router(dev.router, prefix="/dev", tags=["dev"])


def run():
    """Console entry point: serves the app with uvicorn."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
