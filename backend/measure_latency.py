"""Utility script to time trip plan generation against the configured gateway."""

import sys
import time
import statistics

from trip_planner.integrations.errors import TripPlanError
from trip_planner.models.trip_request import TripPlanRequest
from trip_planner.planner.service import ItineraryService


def run_trial(service: ItineraryService, req: TripPlanRequest, label: str) -> float:
    print(f"Running {label}...")
    start = time.perf_counter()
    try:
        plan = service.generate(req)
    except TripPlanError as e:
        duration = time.perf_counter() - start
        print(f"{label} failed after {duration:.2f}s: {e}")
        return duration
    duration = time.perf_counter() - start

    print(
        f"{label} runtime: {duration:.2f}s | "
        f"hotels: {len(plan.hotels)}, "
        f"places: {len(plan.places_to_visit)}, "
        f"food: {len(plan.food_places)}, "
        f"tips: {len(plan.tips)}"
    )
    return duration


if __name__ == "__main__":
    trials = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    req = TripPlanRequest(from_location="Nairobi", to_location="Dubai", travel_days=6)
    service = ItineraryService()

    durations = [run_trial(service, req, f"trial {i + 1}") for i in range(trials)]
    print()
    print(f"mean: {statistics.mean(durations):.2f}s | max: {max(durations):.2f}s")
