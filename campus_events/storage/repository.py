from __future__ import annotations

from typing import Protocol

from .models import (
    Club,
    ClubCreate,
    ClubFollower,
    ClubUpdate,
    Event,
    EventCreate,
    EventUpdate,
    Rsvp,
    RsvpStatus,
    User,
    UserCreate,
    UserUpdate,
)


class EventStore(Protocol):
    """
    Repository interface shared by every storage backend.

    Lookups of unknown ids return ``None`` and deletes return whether a
    record was removed. Identifiers are assigned by the backend.
    """

    # Users
    def get_user(self, user_id: int) -> User | None: ...
    def get_user_by_username(self, username: str) -> User | None: ...
    def create_user(self, data: UserCreate) -> User: ...
    def update_user(self, user_id: int, data: UserUpdate) -> User | None: ...

    # Events
    def list_events(self) -> list[Event]: ...
    def get_event(self, event_id: int) -> Event | None: ...
    def list_events_by_organizer(self, organizer_id: int) -> list[Event]: ...
    def list_events_by_user(self, user_id: int) -> list[Event]: ...
    def create_event(
        self, data: EventCreate, organizer_id: int | None, organizer: str
    ) -> Event: ...
    def update_event(self, event_id: int, data: EventUpdate) -> Event | None: ...
    def delete_event(self, event_id: int) -> bool: ...

    # RSVPs
    def list_rsvps(self, event_id: int) -> list[Rsvp]: ...
    def list_rsvps_by_user(self, user_id: int) -> list[Rsvp]: ...
    def create_rsvp(self, event_id: int, user_id: int, status: RsvpStatus) -> Rsvp: ...
    def delete_rsvp(self, event_id: int, user_id: int) -> bool: ...

    # Clubs
    def list_clubs(self) -> list[Club]: ...
    def get_club(self, club_id: int) -> Club | None: ...
    def create_club(self, data: ClubCreate) -> Club: ...
    def update_club(self, club_id: int, data: ClubUpdate) -> Club | None: ...
    def delete_club(self, club_id: int) -> bool: ...

    # Club followers
    def list_club_followers(self, club_id: int) -> list[ClubFollower]: ...
    def list_club_followers_by_user(self, user_id: int) -> list[ClubFollower]: ...
    def follow_club(self, club_id: int, user_id: int) -> ClubFollower: ...
    def unfollow_club(self, club_id: int, user_id: int) -> bool: ...
