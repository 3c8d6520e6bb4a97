from pydantic import Field
from typing import Optional
from .common import CamelModel


class ReviewCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    user_name: str = Field(..., min_length=1, max_length=80)
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field("", max_length=2000)


class ReviewOut(CamelModel):
    id: str
    user_id: str
    user_name: str
    rating: int
    comment: str = ""
    date: str  # YYYY-MM-DD
