import json
import re
from typing import Any

from pydantic import ValidationError

from trip_planner.integrations.errors import MalformedResponse
from trip_planner.models.entities import TripPlanResponse

_OPENING_FENCE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_CLOSING_FENCE = "```"


def _strip_once(text: str) -> str:
    cleaned = _OPENING_FENCE.sub("", text, count=1)
    if cleaned.endswith(_CLOSING_FENCE):
        cleaned = cleaned[: -len(_CLOSING_FENCE)]
    return cleaned.strip()


def strip_code_fences(text: str) -> str:
    """
    Remove leading ``` / ```json markers and trailing ``` markers.

    Fences are peeled until nothing changes, so stacked or whitespace-separated
    fences all go in one call and running the function on its own output
    changes nothing. Unfenced text only gets its surrounding whitespace trimmed.
    """
    if not text:
        return ""
    cleaned = text.strip()
    while True:
        stripped = _strip_once(cleaned)
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


def parse_json_payload(raw_text: str) -> Any:
    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponse(raw_text, f"invalid JSON ({e.msg})") from e


def parse_trip_plan(raw_text: str) -> TripPlanResponse:
    """Fence-strip, decode and validate a model reply as a whole trip plan."""
    data = parse_json_payload(raw_text)
    if not isinstance(data, dict):
        raise MalformedResponse(raw_text, f"expected a JSON object, got {type(data).__name__}")
    try:
        return TripPlanResponse.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise MalformedResponse(raw_text, f"schema mismatch at {', '.join(fields)}") from e
