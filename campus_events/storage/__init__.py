"""
Data store layer.

Responsibilities:
- Define the User, Event, Club, Rsvp and ClubFollower records.
- Expose a single repository interface over interchangeable backends.
- Provide an in-memory backend and a SQL backend (SQLAlchemy).
- Seed the sample campus data into an empty store.
"""
