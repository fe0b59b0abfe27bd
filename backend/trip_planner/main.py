import json
import logging
import argparse
from typing import List, Optional

from pydantic import BaseModel

from trip_planner.models.entities import RecommendationItem, TripPlanResponse
from trip_planner.models.trip_request import TripPlanRequest
from trip_planner.planner.service import ItineraryService

EMPTY_MESSAGE = "No data available"

# (tab value, category key, tab label, section heading)
TABS = [
    ("hotels", "hotels", "Hotels", "Hotel Recommendations"),
    ("places", "places_to_visit", "Places", "Must-Visit Places"),
    ("food", "food_places", "Food", "Food & Dining"),
    ("attractions", "attractions", "Attractions", "Top Attractions"),
    ("transport", "transportation", "Transport", "Transportation Options"),
    ("gems", "hidden_gems", "Hidden Gems", "Hidden Gems"),
    ("tips", "tips", "Tips", "Travel Tips"),
]

CARD_KEYS = ["name", "description", "price_range", "price", "rating", "tips"]


def _to_dict(obj):
    """Convert BaseModel or dict to plain dict, else return None."""
    if obj is None:
        return None
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, dict):
        return obj
    return None


def _prune(d: dict, keys: list):
    return {k: d.get(k) for k in keys if d.get(k) is not None}


def _cards(items: Optional[List[RecommendationItem]]) -> List[dict]:
    cards = []
    for item in items or []:
        d = _to_dict(item)
        if not d:
            continue
        cards.append(_prune(d, CARD_KEYS))
    return cards


def format_trip(plan: TripPlanResponse, from_location: str, to_location: str, travel_days: int) -> dict:
    """Shape a plan into the tabbed results view: a header card plus one tab per category."""
    tabs = []
    for value, key, label, heading in TABS:
        cards = _cards(getattr(plan, key, None))
        tab = {"value": value, "category": key, "label": label, "heading": heading, "items": cards}
        if not cards:
            tab["empty_message"] = EMPTY_MESSAGE
        tabs.append(tab)

    return {
        "title": f"{from_location} → {to_location}",
        "subtitle": f"{travel_days} Day Trip Plan",
        "budget_per_person": plan.budget_per_person,
        "best_time_to_visit": plan.best_time_to_visit,
        "default_tab": TABS[0][0],
        "tabs": tabs,
    }


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Generate a trip plan and print the tabbed view")
    parser.add_argument("--from", dest="from_location", required=True)
    parser.add_argument("--to", dest="to_location", required=True)
    parser.add_argument("--days", default="5")
    args = parser.parse_args()

    req = TripPlanRequest.from_payload(
        {"fromLocation": args.from_location, "toLocation": args.to_location, "travelDays": args.days}
    ).validated()
    plan = ItineraryService().generate(req)
    view = format_trip(plan, req.from_location, req.to_location, req.travel_days)
    print(json.dumps(view, indent=2, ensure_ascii=False))
