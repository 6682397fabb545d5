from __future__ import annotations

import itertools
from datetime import datetime, timezone

from ..auth.users import hash_password
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


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    """Single-process store backed by plain dicts keyed by id."""

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._events: dict[int, Event] = {}
        self._rsvps: dict[int, Rsvp] = {}
        self._clubs: dict[int, Club] = {}
        self._followers: dict[int, ClubFollower] = {}

        self._user_ids = itertools.count(1)
        self._event_ids = itertools.count(1)
        self._rsvp_ids = itertools.count(1)
        self._club_ids = itertools.count(1)
        self._follower_ids = itertools.count(1)

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def create_user(self, data: UserCreate) -> User:
        user = User(
            id=next(self._user_ids),
            password_hash=hash_password(data.password),
            created_at=_now(),
            **data.model_dump(exclude={"password"}),
        )
        self._users[user.id] = user
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update=data.model_dump(exclude_unset=True, exclude_none=True))
        self._users[user_id] = updated
        return updated

    # ── Events ───────────────────────────────────────────────────────────

    def _with_attendees(self, event: Event) -> Event:
        count = sum(
            1
            for r in self._rsvps.values()
            if r.event_id == event.id and r.status == RsvpStatus.attending
        )
        return event.model_copy(update={"attendees": count})

    def list_events(self) -> list[Event]:
        return [self._with_attendees(e) for e in self._events.values()]

    def get_event(self, event_id: int) -> Event | None:
        event = self._events.get(event_id)
        return self._with_attendees(event) if event else None

    def list_events_by_organizer(self, organizer_id: int) -> list[Event]:
        return [e for e in self.list_events() if e.organizer_id == organizer_id]

    def list_events_by_user(self, user_id: int) -> list[Event]:
        event_ids = {r.event_id for r in self.list_rsvps_by_user(user_id)}
        return [e for e in self.list_events() if e.id in event_ids]

    def create_event(
        self, data: EventCreate, organizer_id: int | None, organizer: str
    ) -> Event:
        event = Event(
            id=next(self._event_ids),
            organizer_id=organizer_id,
            organizer=organizer,
            created_at=_now(),
            **data.model_dump(),
        )
        self._events[event.id] = event
        return event

    def update_event(self, event_id: int, data: EventUpdate) -> Event | None:
        event = self._events.get(event_id)
        if event is None:
            return None
        updated = event.model_copy(update=data.model_dump(exclude_unset=True, exclude_none=True))
        self._events[event_id] = updated
        return self._with_attendees(updated)

    def delete_event(self, event_id: int) -> bool:
        if self._events.pop(event_id, None) is None:
            return False
        for rid in [rid for rid, r in self._rsvps.items() if r.event_id == event_id]:
            del self._rsvps[rid]
        return True

    # ── RSVPs ────────────────────────────────────────────────────────────

    def _find_rsvp(self, event_id: int, user_id: int) -> Rsvp | None:
        for rsvp in self._rsvps.values():
            if rsvp.event_id == event_id and rsvp.user_id == user_id:
                return rsvp
        return None

    def list_rsvps(self, event_id: int) -> list[Rsvp]:
        return [r for r in self._rsvps.values() if r.event_id == event_id]

    def list_rsvps_by_user(self, user_id: int) -> list[Rsvp]:
        return [r for r in self._rsvps.values() if r.user_id == user_id]

    def create_rsvp(self, event_id: int, user_id: int, status: RsvpStatus) -> Rsvp:
        existing = self._find_rsvp(event_id, user_id)
        if existing:
            existing.status = status
            return existing

        rsvp = Rsvp(
            id=next(self._rsvp_ids),
            event_id=event_id,
            user_id=user_id,
            status=status,
            created_at=_now(),
        )
        self._rsvps[rsvp.id] = rsvp
        return rsvp

    def delete_rsvp(self, event_id: int, user_id: int) -> bool:
        rsvp = self._find_rsvp(event_id, user_id)
        if rsvp is None:
            return False
        del self._rsvps[rsvp.id]
        return True

    # ── Clubs ────────────────────────────────────────────────────────────

    def _with_followers(self, club: Club) -> Club:
        count = sum(1 for f in self._followers.values() if f.club_id == club.id)
        return club.model_copy(update={"followers": count})

    def list_clubs(self) -> list[Club]:
        return [self._with_followers(c) for c in self._clubs.values()]

    def get_club(self, club_id: int) -> Club | None:
        club = self._clubs.get(club_id)
        return self._with_followers(club) if club else None

    def create_club(self, data: ClubCreate) -> Club:
        club = Club(id=next(self._club_ids), created_at=_now(), **data.model_dump())
        self._clubs[club.id] = club
        return club

    def update_club(self, club_id: int, data: ClubUpdate) -> Club | None:
        club = self._clubs.get(club_id)
        if club is None:
            return None
        updated = club.model_copy(update=data.model_dump(exclude_unset=True, exclude_none=True))
        self._clubs[club_id] = updated
        return self._with_followers(updated)

    def delete_club(self, club_id: int) -> bool:
        if self._clubs.pop(club_id, None) is None:
            return False
        for fid in [fid for fid, f in self._followers.items() if f.club_id == club_id]:
            del self._followers[fid]
        return True

    # ── Club followers ───────────────────────────────────────────────────

    def _find_follower(self, club_id: int, user_id: int) -> ClubFollower | None:
        for follower in self._followers.values():
            if follower.club_id == club_id and follower.user_id == user_id:
                return follower
        return None

    def list_club_followers(self, club_id: int) -> list[ClubFollower]:
        return [f for f in self._followers.values() if f.club_id == club_id]

    def list_club_followers_by_user(self, user_id: int) -> list[ClubFollower]:
        return [f for f in self._followers.values() if f.user_id == user_id]

    def follow_club(self, club_id: int, user_id: int) -> ClubFollower:
        existing = self._find_follower(club_id, user_id)
        if existing:
            return existing

        follower = ClubFollower(
            id=next(self._follower_ids),
            club_id=club_id,
            user_id=user_id,
            created_at=_now(),
        )
        self._followers[follower.id] = follower
        return follower

    def unfollow_club(self, club_id: int, user_id: int) -> bool:
        follower = self._find_follower(club_id, user_id)
        if follower is None:
            return False
        del self._followers[follower.id]
        return True
