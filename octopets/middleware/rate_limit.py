"""
Shared slowapi limiter for the endpoints that call the completion provider.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import get_settings

settings = get_settings()

# Per-client-address limits; tests switch it off with limiter.enabled = False
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

PET_ANALYSIS_LIMIT = settings.pet_analysis_rate_limit
