#!/usr/bin/env python3
"""
FastAPI server runner for the TripPlanner backend
"""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "trip_planner.api:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,  # Enable auto-reload for development
        log_level="info"
    )
