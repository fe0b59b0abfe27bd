import textwrap
from typing import Dict, List

from trip_planner.models.trip_request import TripPlanRequest

SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are an expert travel planner. Generate comprehensive travel information in valid JSON format only. Return a JSON object with these exact keys: hotels, places_to_visit, food_places, attractions, transportation, hidden_gems, tips, budget_per_person, best_time_to_visit.

    For each category (except budget_per_person and best_time_to_visit which are strings):
    - Return an array of objects
    - Each object should have: name, description, price_range (or price for budget), rating, tips
    - For transportation: include modes and estimated costs
    - Be specific and detailed
    - Include actual places and recommendations

    Example format:
    {
      "hotels": [{"name": "Hotel Name", "description": "...", "price_range": "$100-150/night", "rating": "4.5/5", "tips": "..."}],
      "places_to_visit": [...],
      "food_places": [...],
      "attractions": [...],
      "transportation": [{"name": "Taxi", "description": "...", "price": "$20-30", "tips": "..."}],
      "hidden_gems": [...],
      "tips": [{"name": "General Tip", "description": "...", "tips": "..."}],
      "budget_per_person": "$1500-2000 for the entire trip",
      "best_time_to_visit": "March to May"
    }"""
)

_USER_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    Generate a complete travel plan from {from_location} to {to_location} for {travel_days} days. Include:
    - 3-5 hotel recommendations with prices
    - 5-7 must-visit places
    - 5-7 food places and local cuisine
    - 3-5 main attractions
    - Transportation options and costs
    - 3-5 hidden gems
    - 5-7 useful tips for travelers
    - Overall budget estimate per person
    - Best time to visit

    Return ONLY valid JSON, no markdown formatting or explanations."""
)


def build_user_prompt(req: TripPlanRequest) -> str:
    return _USER_PROMPT_TEMPLATE.format(
        from_location=req.from_location,
        to_location=req.to_location,
        travel_days=req.travel_days,
    )


def build_messages(req: TripPlanRequest) -> List[Dict[str, str]]:
    """Return the system + user chat messages for one trip request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(req)},
    ]
