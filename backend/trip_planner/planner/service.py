import logging
from typing import Optional

import httpx

from trip_planner.config import Settings, get_settings
from trip_planner.integrations.errors import MalformedResponse
from trip_planner.integrations.openai_client import call_gpt
from trip_planner.models.entities import TripPlanResponse
from trip_planner.models.trip_request import TripPlanRequest
from trip_planner.planner.cleaning import parse_trip_plan
from trip_planner.planner.prompts import build_messages

logger = logging.getLogger(__name__)


class ItineraryService:
    """Turns one TripPlanRequest into one TripPlanResponse.

    Every call goes to the gateway exactly once. Nothing is cached: identical
    requests may legitimately produce different recommendations.
    """

    def __init__(self, settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None):
        self.settings = settings or get_settings()
        self.http_client = http_client

    def generate(self, req: TripPlanRequest) -> TripPlanResponse:
        logger.info(
            f"Generating trip plan from {req.from_location} to {req.to_location} for {req.travel_days} days"
        )
        content = call_gpt(build_messages(req), self.settings, self.http_client)
        logger.debug(f"Raw AI response: {content}")

        try:
            plan = parse_trip_plan(content)
        except MalformedResponse as e:
            logger.error(f"Unusable AI response ({e.reason}): {e.raw_text}")
            raise
        logger.info(
            f"Successfully generated trip plan: {len(plan.hotels)} hotels, "
            f"{len(plan.places_to_visit)} places, {len(plan.food_places)} food places"
        )
        return plan


def generate(req: TripPlanRequest, settings: Optional[Settings] = None) -> TripPlanResponse:
    return ItineraryService(settings).generate(req)
