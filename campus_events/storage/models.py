from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RsvpStatus(str, Enum):
    attending = "attending"
    interested = "interested"
    not_attending = "not_attending"


# ── Users ────────────────────────────────────────────────────────────────


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    major: str = "Undeclared"
    year: str = "1st Year"
    interests: list[str] = Field(default_factory=list)


class UserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    major: str | None = None
    year: str | None = None
    interests: list[str] | None = None


class UserOut(CamelModel):
    """Public view of a user; never carries the password hash."""

    id: int
    username: str
    name: str
    major: str = "Undeclared"
    year: str = "1st Year"
    interests: list[str] = Field(default_factory=list)
    created_at: datetime


class User(UserOut):
    password_hash: str


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ── Events ───────────────────────────────────────────────────────────────


class EventCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str
    date: str = Field(..., description='Free text, e.g. "Friday"')
    time: str = Field(..., description='Free text range, e.g. "3:00-5:00 PM"')
    location: str
    categories: list[str] = Field(default_factory=list)
    image_url: str | None = None
    featured: bool = False


class EventUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    categories: list[str] | None = None
    image_url: str | None = None
    featured: bool | None = None


class Event(CamelModel):
    id: int
    title: str
    description: str
    date: str
    time: str
    location: str
    categories: list[str] = Field(default_factory=list)
    organizer_id: int | None = None
    organizer: str
    image_url: str | None = None
    featured: bool = False
    created_at: datetime
    attendees: int = 0


class EventFilters(CamelModel):
    category: str | None = None
    location: str | None = None
    date: str | None = None
    search: str | None = None


# ── Clubs ────────────────────────────────────────────────────────────────


class ClubCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str
    categories: list[str] = Field(default_factory=list)
    image_url: str | None = None


class ClubUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    categories: list[str] | None = None
    image_url: str | None = None


class Club(CamelModel):
    id: int
    name: str
    description: str
    categories: list[str] = Field(default_factory=list)
    image_url: str | None = None
    created_at: datetime
    followers: int = 0


# ── Relations ────────────────────────────────────────────────────────────


class RsvpRequest(CamelModel):
    status: RsvpStatus = RsvpStatus.attending


class Rsvp(CamelModel):
    id: int
    event_id: int
    user_id: int
    status: RsvpStatus
    created_at: datetime


class ClubFollower(CamelModel):
    id: int
    club_id: int
    user_id: int
    created_at: datetime
