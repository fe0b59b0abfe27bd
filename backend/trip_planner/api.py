import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trip_planner.auth.session import Session, SessionProvider
from trip_planner.config import get_settings
from trip_planner.integrations.errors import InvalidTripRequest, TripPlanError, error_response
from trip_planner.integrations.mongo_client import TripStore, get_trip_store
from trip_planner.main import format_trip
from trip_planner.models.trip_request import TripPlanRequest
from trip_planner.planner.service import ItineraryService

# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

FUNCTION_PATH = "/functions/v1/generate-trip-plan"

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}


def _log_auth_event(event, session: Optional[Session]):
    logger.info(f"Auth event {event} for user {session.user_id if session else None}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    subscription = app.state.sessions.on_auth_state_change(_log_auth_event)
    yield
    subscription.unsubscribe()


app = FastAPI(
    title="TripPlanner AI Backend",
    description="AI-generated travel itineraries with per-user trip history",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.sessions = SessionProvider()

# Bearer tokens, not cookies, so credentials stay off and "*" is sent verbatim
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Registered after CORSMiddleware so it runs first: every OPTIONS on the
# function path, browser preflight or not, gets an empty 200.
@app.middleware("http")
async def function_preflight(request: Request, call_next):
    if request.method == "OPTIONS" and request.url.path == FUNCTION_PATH:
        return Response(status_code=200, headers=CORS_HEADERS)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_itinerary_service() -> ItineraryService:
    return ItineraryService()


def get_session_provider(request: Request) -> SessionProvider:
    return request.app.state.sessions


def get_store() -> Optional[TripStore]:
    return get_trip_store()


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_session(
    token: Optional[str] = Depends(bearer_token),
    sessions: SessionProvider = Depends(get_session_provider),
) -> Optional[Session]:
    return sessions.get_session(token)


def require_session(session: Optional[Session] = Depends(current_session)) -> Session:
    if session is None:
        raise HTTPException(status_code=401, detail="Sign in required")
    return session


def require_store(store: Optional[TripStore] = Depends(get_store)) -> TripStore:
    if store is None:
        raise HTTPException(status_code=503, detail="Trip history is not configured")
    return store


def _error_json(error: Exception, context: str) -> JSONResponse:
    status, body = error_response(error)
    if isinstance(error, TripPlanError):
        logger.error(f"Error in {context}: {error}")
    else:
        logger.exception(f"Unexpected error in {context}")
    return JSONResponse(body, status_code=status, headers=CORS_HEADERS)


async def _read_trip_request(request: Request) -> TripPlanRequest:
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidTripRequest("Request body must be valid JSON")
    return TripPlanRequest.from_payload(payload)


# ---------------------------------------------------------------------------
# Generation function
# ---------------------------------------------------------------------------

@app.post(FUNCTION_PATH)
async def generate_trip_plan(request: Request, service: ItineraryService = Depends(get_itinerary_service)):
    """
    Generate a trip plan.

    - **fromLocation**: where the trip starts
    - **toLocation**: destination
    - **travelDays**: number of days (whole number)

    Returns the nine-key itinerary object, or `{"error": ...}` with 400/402/429/500.
    """
    try:
        trip_req = await _read_trip_request(request)
        plan = await asyncio.to_thread(service.generate, trip_req)
    except Exception as e:
        return _error_json(e, "generate-trip-plan")
    return JSONResponse(plan.to_wire(), headers=CORS_HEADERS)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class SignInRequest(BaseModel):
    email: str


@app.post("/auth/sign-in")
def sign_in(body: SignInRequest, sessions: SessionProvider = Depends(get_session_provider)):
    try:
        session = sessions.sign_in(body.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"access_token": session.access_token, "user": {"id": session.user_id, "email": session.email}}


@app.get("/auth/session")
def get_current_session(session: Optional[Session] = Depends(current_session)):
    if session is None:
        return {"session": None}
    return {"session": {"user": {"id": session.user_id, "email": session.email}, "created_at": session.created_at}}


@app.post("/auth/sign-out")
def sign_out(
    token: Optional[str] = Depends(bearer_token),
    sessions: SessionProvider = Depends(get_session_provider),
):
    return {"signed_out": bool(token) and sessions.sign_out(token)}


# ---------------------------------------------------------------------------
# Planner and history
# ---------------------------------------------------------------------------

@app.post("/planner/trips")
async def plan_trip(
    request: Request,
    session: Session = Depends(require_session),
    service: ItineraryService = Depends(get_itinerary_service),
    store: Optional[TripStore] = Depends(get_store),
):
    """Validate the planner form, generate the itinerary and save it to the user's history."""
    try:
        trip_req = (await _read_trip_request(request)).validated()
        plan = await asyncio.to_thread(service.generate, trip_req)
    except Exception as e:
        return _error_json(e, "planner")

    saved_trip_id = None
    if store is not None:
        try:
            stored = await asyncio.to_thread(store.insert_trip, session.user_id, trip_req, plan)
            saved_trip_id = stored.id
        except Exception:
            # The itinerary is still returned when saving fails
            logger.exception("Error saving trip")

    return {
        "trip": plan.to_wire(),
        "view": format_trip(plan, trip_req.from_location, trip_req.to_location, trip_req.travel_days),
        "saved_trip_id": saved_trip_id,
    }


@app.get("/history/trips")
def list_trips(session: Session = Depends(require_session), store: TripStore = Depends(require_store)):
    try:
        trips = store.list_trips(session.user_id)
    except Exception:
        logger.exception("Error fetching trips")
        raise HTTPException(status_code=500, detail="Failed to load trip history")
    return {"trips": [t.model_dump(mode="json", exclude_none=True) for t in trips]}


@app.get("/history/trips/{trip_id}")
def get_trip(trip_id: str, session: Session = Depends(require_session), store: TripStore = Depends(require_store)):
    try:
        trip = store.get_trip(session.user_id, trip_id)
    except Exception:
        logger.exception(f"Error fetching trip {trip_id}")
        raise HTTPException(status_code=500, detail="Failed to load trip")
    if trip is None:
        raise HTTPException(status_code=404, detail="Trip not found")
    return {
        "trip": trip.model_dump(mode="json", exclude_none=True),
        "view": format_trip(trip, trip.from_location, trip.to_location, trip.travel_days),
    }


@app.delete("/history/trips/{trip_id}")
def delete_trip(trip_id: str, session: Session = Depends(require_session), store: TripStore = Depends(require_store)):
    try:
        deleted = store.delete_trip(session.user_id, trip_id)
    except Exception:
        logger.exception(f"Error deleting trip {trip_id}")
        raise HTTPException(status_code=500, detail="Failed to delete trip")
    if not deleted:
        raise HTTPException(status_code=404, detail="Trip not found")
    return {"deleted": True, "id": trip_id}


@app.get("/")
def root():
    return {
        "message": "TripPlanner AI Backend",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "generate_trip_plan": FUNCTION_PATH,
            "planner": "/planner/trips",
            "history": "/history/trips",
            "docs": "/docs",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy", "service": "TripPlanner Backend"}
