"""
TripPlanner backend package.

Generates AI travel itineraries through an OpenAI-compatible gateway and keeps
a per-user history of generated trips.
"""
