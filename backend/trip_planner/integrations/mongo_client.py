"""MongoDB-backed storage for a user's trip history.

Uses pymongo synchronously. When MONGODB_URI is not configured the store is
simply unavailable (get_trip_store() returns None), so local runs and CI work
without a database and trip generation never depends on it.
"""

from __future__ import annotations

import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection

from trip_planner.config import Settings, get_settings
from trip_planner.models.entities import CATEGORY_KEYS, TEXT_KEYS, StoredTrip, TripPlanResponse
from trip_planner.models.trip_request import TripPlanRequest

logger = logging.getLogger(__name__)

TRIPS_COLLECTION = "trips"

_client: Optional[MongoClient] = None
_warned_missing_uri = False


def get_mongo_client(settings: Optional[Settings] = None) -> Optional[MongoClient]:
    global _client, _warned_missing_uri
    if _client is not None:
        return _client
    settings = settings or get_settings()
    if not settings.mongodb_uri:
        if not _warned_missing_uri:
            logger.warning("MONGODB_URI not set; trip history disabled")
            _warned_missing_uri = True
        return None
    _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=3000, tz_aware=True)
    return _client


class TripStore:
    """User-scoped insert / list / get / delete over the trips collection."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def insert_trip(
        self,
        user_id: str,
        req: TripPlanRequest,
        plan: TripPlanResponse,
        created_at: Optional[datetime] = None,
    ) -> StoredTrip:
        doc = {
            "_id": str(uuid.uuid4()),
            "user_id": user_id,
            "from_location": req.from_location,
            "to_location": req.to_location,
            "travel_days": req.travel_days,
            "created_at": created_at or datetime.now(timezone.utc),
            **plan.to_wire(),
        }
        self.collection.insert_one(doc)
        logger.info(f"Saved trip {doc['_id']} for user {user_id}")
        return _to_trip(doc)

    def list_trips(self, user_id: str) -> List[StoredTrip]:
        """Return the user's trips, newest first."""
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", DESCENDING)
        return [_to_trip(doc) for doc in cursor]

    def get_trip(self, user_id: str, trip_id: str) -> Optional[StoredTrip]:
        doc = self.collection.find_one({"_id": trip_id, "user_id": user_id})
        return _to_trip(doc) if doc else None

    def delete_trip(self, user_id: str, trip_id: str) -> bool:
        res = self.collection.delete_one({"_id": trip_id, "user_id": user_id})
        deleted = res.deleted_count > 0
        if deleted:
            logger.info(f"Deleted trip {trip_id} for user {user_id}")
        return deleted


def _to_trip(doc: Dict[str, Any]) -> StoredTrip:
    fields = {k: doc.get(k) for k in CATEGORY_KEYS + TEXT_KEYS}
    return StoredTrip(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        from_location=doc["from_location"],
        to_location=doc["to_location"],
        travel_days=doc["travel_days"],
        created_at=doc["created_at"],
        **fields,
    )


def get_trip_store(settings: Optional[Settings] = None) -> Optional[TripStore]:
    settings = settings or get_settings()
    client = get_mongo_client(settings)
    if client is None:
        return None
    return TripStore(client[settings.mongodb_db][TRIPS_COLLECTION])
