#!/usr/bin/env python3
"""
Smoke script for a running TripPlanner API (see run_server.py)
"""

import json

import requests

# API base URL
BASE_URL = "http://localhost:8000"


def check_health():
    """Check the health endpoint"""
    print("Checking health endpoint...")
    response = requests.get(f"{BASE_URL}/health")
    print(f"Status: {response.status_code}")
    print(f"Response: {response.json()}")
    print()


def check_generate():
    """Call the generation function directly"""
    print("Checking generate-trip-plan...")

    trip_request = {"fromLocation": "New York", "toLocation": "Paris", "travelDays": 5}
    print(f"Request: {json.dumps(trip_request, indent=2)}")
    print()

    try:
        response = requests.post(
            f"{BASE_URL}/functions/v1/generate-trip-plan",
            json=trip_request,
            headers={"Content-Type": "application/json"},
        )
        print(f"Status: {response.status_code}")

        if response.status_code == 200:
            plan = response.json()
            print("✅ Trip plan generated successfully!")
            print(f"  Budget: {plan.get('budget_per_person')}")
            print(f"  Best time: {plan.get('best_time_to_visit')}")
            for key in ["hotels", "places_to_visit", "food_places", "attractions", "transportation", "hidden_gems", "tips"]:
                print(f"  {key}: {len(plan.get(key, []))}")
            if plan.get("hotels"):
                hotel = plan["hotels"][0]
                print(f"\n🏨 Sample Hotel: {hotel.get('name')} ({hotel.get('price_range', 'N/A')})")
        else:
            print("❌ Error generating trip plan")
            print(f"Response: {response.text}")

    except requests.exceptions.ConnectionError:
        print("❌ Could not connect to the API server")
        print("Make sure the server is running: python run_server.py")

    print()


def check_planner_and_history():
    """Sign in, plan a trip through the planner handler, then list history"""
    print("Checking planner + history...")
    session = requests.post(f"{BASE_URL}/auth/sign-in", json={"email": "smoke@example.com"}).json()
    headers = {"Authorization": f"Bearer {session['access_token']}"}

    response = requests.post(
        f"{BASE_URL}/planner/trips",
        json={"fromLocation": "Lisbon", "toLocation": "Porto", "travelDays": "3"},
        headers=headers,
    )
    print(f"Planner status: {response.status_code}")
    if response.ok:
        print(f"Saved trip id: {response.json().get('saved_trip_id')}")

    history = requests.get(f"{BASE_URL}/history/trips", headers=headers)
    print(f"History status: {history.status_code}")
    if history.ok:
        print(f"Trips in history: {len(history.json().get('trips', []))}")

    requests.post(f"{BASE_URL}/auth/sign-out", headers=headers)
    print()


if __name__ == "__main__":
    print("🚀 TripPlanner API smoke run")
    print("=" * 50)

    try:
        check_health()
        check_generate()
        check_planner_and_history()
        print("✅ Smoke run completed!")
        print("\n💡 Visit http://localhost:8000/docs for interactive API documentation")
    except KeyboardInterrupt:
        print("\n⏹️ Smoke run interrupted by user")
