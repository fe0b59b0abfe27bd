import re
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from trip_planner.integrations.errors import InvalidTripRequest

MIN_TRAVEL_DAYS = 1
MAX_TRAVEL_DAYS = 30

_WHOLE_NUMBER = re.compile(r"^[+-]?\d+$")


def parse_travel_days(value: Any) -> int:
    """Coerce a wire day-count to int, rejecting anything non-numeric.

    Accepts ints, integral floats and digit strings such as "5".
    """
    if isinstance(value, bool):
        raise InvalidTripRequest("travelDays must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _WHOLE_NUMBER.match(text):
            return int(text)
    raise InvalidTripRequest("travelDays must be a whole number")


class TripPlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_location: str = Field(alias="fromLocation")
    to_location: str = Field(alias="toLocation")
    travel_days: int = Field(alias="travelDays")

    @classmethod
    def from_payload(cls, payload: Any) -> "TripPlanRequest":
        """Build a request from a decoded JSON body without range checks."""
        if not isinstance(payload, dict):
            raise InvalidTripRequest("Request body must be a JSON object")
        from_location = payload.get("fromLocation")
        to_location = payload.get("toLocation")
        if not isinstance(from_location, str) or not isinstance(to_location, str):
            raise InvalidTripRequest("fromLocation and toLocation must be strings")
        return cls(
            from_location=from_location,
            to_location=to_location,
            travel_days=parse_travel_days(payload.get("travelDays")),
        )

    def validated(self) -> "TripPlanRequest":
        """Return a trimmed copy, enforcing the planner form rules."""
        from_location = self.from_location.strip()
        to_location = self.to_location.strip()
        if not from_location or not to_location:
            raise InvalidTripRequest("Please enter both from and to locations")
        if not MIN_TRAVEL_DAYS <= self.travel_days <= MAX_TRAVEL_DAYS:
            raise InvalidTripRequest(
                f"travelDays must be between {MIN_TRAVEL_DAYS} and {MAX_TRAVEL_DAYS}"
            )
        return TripPlanRequest(
            from_location=from_location,
            to_location=to_location,
            travel_days=self.travel_days,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
