# octopets/utils.py
from typing import Any, Dict, Iterable, Optional
from bson import ObjectId
from datetime import datetime
from fastapi import HTTPException


def to_id(doc: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Converts _id -> id (str) and every ObjectId to a string.
    Datetimes become ISO strings. Returns {} when doc is None.
    """
    if doc is None:
        return {}
    d = dict(doc)

    if "_id" in d:
        d["id"] = str(d.pop("_id"))

    for key, value in d.items():
        if isinstance(value, ObjectId):
            d[key] = str(value)
        elif isinstance(value, datetime):
            d[key] = value.isoformat()
        elif isinstance(value, dict):
            d[key] = to_id(value)
        elif isinstance(value, list):
            d[key] = [
                str(item) if isinstance(item, ObjectId)
                else item.isoformat() if isinstance(item, datetime)
                else to_id(item) if isinstance(item, dict)
                else item
                for item in value
            ]

    return d


def to_object_id(value: str, not_found: str = "Not found") -> ObjectId:
    """
    Converts a path id to an ObjectId. A malformed id can never match a
    stored document, so it is reported as 404 like any unknown id.
    """
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=404, detail=not_found)
    return ObjectId(value)


def average_rating(reviews: Iterable[Dict[str, Any]]) -> float:
    """Arithmetic mean of the review ratings, 0 when there are none."""
    ratings = [r["rating"] for r in reviews]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)
