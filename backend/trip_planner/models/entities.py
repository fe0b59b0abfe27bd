# trip_planner/models/entities.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

CATEGORY_KEYS = (
    "hotels",
    "places_to_visit",
    "food_places",
    "attractions",
    "transportation",
    "hidden_gems",
    "tips",
)

TEXT_KEYS = ("budget_per_person", "best_time_to_visit")


def _as_display_text(value: Any) -> Any:
    # Models sometimes answer "rating": 4.5; keep it as an opaque string.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class RecommendationItem(BaseModel):
    name: str = Field(min_length=1)
    description: str
    price_range: Optional[str] = None
    price: Optional[str] = None
    rating: Optional[str] = None
    tips: Optional[str] = None

    @field_validator("price_range", "price", "rating", "tips", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_display_text(value)


class TripPlanResponse(BaseModel):
    hotels: List[RecommendationItem]
    places_to_visit: List[RecommendationItem]
    food_places: List[RecommendationItem]
    attractions: List[RecommendationItem]
    transportation: List[RecommendationItem]
    hidden_gems: List[RecommendationItem]
    tips: List[RecommendationItem]
    budget_per_person: str
    best_time_to_visit: str

    @field_validator("budget_per_person", "best_time_to_visit", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_display_text(value)

    def to_wire(self) -> dict:
        """Plain dict with exactly the nine documented keys."""
        return self.model_dump(include=set(CATEGORY_KEYS + TEXT_KEYS), exclude_none=True)


class StoredTrip(TripPlanResponse):
    id: str
    user_id: str
    from_location: str
    to_location: str
    travel_days: int
    created_at: datetime
