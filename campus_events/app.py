from __future__ import annotations

import os

from fastapi import Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_recommendation_analytics
from .analytics.dashboard import OrganizerDashboard, summarize_organizer_events
from .analytics.store import get_events
from .auth.dependencies import require_user
from .auth.users import authenticate
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .recommendations.engine import get_event_recommendations
from .recommendations.models import RecommendationResponse
from .recommendations.scoring import recommend_clubs
from .storage.data_store import get_store
from .storage.filters import filter_clubs, filter_events
from .storage.models import (
    Club,
    ClubCreate,
    ClubFollower,
    Event,
    EventCreate,
    EventFilters,
    EventUpdate,
    LoginRequest,
    Rsvp,
    RsvpRequest,
    User,
    UserCreate,
    UserOut,
    UserUpdate,
)
from .storage.repository import EventStore

app = FastAPI(title="Campus Events API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "campus-events-secret-change-in-production"),
)


def get_llm_config() -> LLMConfig:
    return DEFAULT_LLM_CONFIG


def _get_event_or_404(store: EventStore, event_id: int) -> Event:
    event = store.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _get_club_or_404(store: EventStore, club_id: int) -> Club:
    club = store.get_club(club_id)
    if club is None:
        raise HTTPException(status_code=404, detail="Club not found")
    return club


def _get_own_event(store: EventStore, event_id: int, user: User) -> Event:
    event = _get_event_or_404(store, event_id)
    if event.organizer_id != user.id:
        raise HTTPException(status_code=403, detail="Only the organizer can manage this event")
    return event


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/api/auth/register", response_model=UserOut, status_code=201)
def register(
    body: UserCreate,
    request: Request,
    store: EventStore = Depends(get_store),
) -> User:
    if store.get_user_by_username(body.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    user = store.create_user(body)
    request.session["user_id"] = user.id
    return user


@app.post("/api/auth/login", response_model=UserOut)
def login(
    body: LoginRequest,
    request: Request,
    store: EventStore = Depends(get_store),
) -> User:
    user = authenticate(store, body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user_id"] = user.id
    return user


@app.post("/api/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/api/auth/me", response_model=UserOut)
def auth_me(user: User = Depends(require_user)) -> User:
    return user


# ── User endpoints ───────────────────────────────────────────────────────


@app.patch("/api/users/profile", response_model=UserOut)
def update_profile(
    body: UserUpdate,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> User:
    updated = store.update_user(user.id, body)
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    return updated


# ── Event endpoints ──────────────────────────────────────────────────────
# Fixed paths are registered before /api/events/{event_id}.


@app.get("/api/events", response_model=list[Event])
def list_events(
    category: str | None = None,
    location: str | None = None,
    date: str | None = None,
    search: str | None = None,
    store: EventStore = Depends(get_store),
) -> list[Event]:
    filters = EventFilters(category=category, location=location, date=date, search=search)
    return filter_events(store.list_events(), filters)


@app.get("/api/events/organizer", response_model=list[Event])
def organizer_events(
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> list[Event]:
    return store.list_events_by_organizer(user.id)


@app.get("/api/events/user", response_model=list[Event])
def user_events(
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> list[Event]:
    return store.list_events_by_user(user.id)


@app.get("/api/events/{event_id}", response_model=Event)
def get_event(event_id: int, store: EventStore = Depends(get_store)) -> Event:
    return _get_event_or_404(store, event_id)


@app.post("/api/events", response_model=Event, status_code=201)
def create_event(
    body: EventCreate,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> Event:
    return store.create_event(body, organizer_id=user.id, organizer=user.name)


@app.patch("/api/events/{event_id}", response_model=Event)
def update_event(
    event_id: int,
    body: EventUpdate,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> Event:
    _get_own_event(store, event_id, user)
    updated = store.update_event(event_id, body)
    if updated is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return updated


@app.delete("/api/events/{event_id}")
def delete_event(
    event_id: int,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> dict:
    _get_own_event(store, event_id, user)
    store.delete_event(event_id)
    return {"status": "deleted"}


# ── RSVP endpoints ───────────────────────────────────────────────────────


@app.get("/api/events/{event_id}/rsvps", response_model=list[Rsvp])
def event_rsvps(
    event_id: int,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> list[Rsvp]:
    _get_own_event(store, event_id, user)
    return store.list_rsvps(event_id)


@app.post("/api/events/{event_id}/rsvp", response_model=Rsvp, status_code=201)
def rsvp(
    event_id: int,
    body: RsvpRequest | None = None,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> Rsvp:
    _get_event_or_404(store, event_id)
    status = (body or RsvpRequest()).status
    return store.create_rsvp(event_id, user.id, status)


@app.delete("/api/events/{event_id}/rsvp")
def cancel_rsvp(
    event_id: int,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> dict:
    if not store.delete_rsvp(event_id, user.id):
        raise HTTPException(status_code=404, detail="RSVP not found")
    return {"status": "cancelled"}


# ── Club endpoints ───────────────────────────────────────────────────────


@app.get("/api/clubs", response_model=list[Club])
def list_clubs(
    category: str | None = None,
    search: str | None = None,
    store: EventStore = Depends(get_store),
) -> list[Club]:
    return filter_clubs(store.list_clubs(), category=category, search=search)


@app.get("/api/clubs/recommended", response_model=list[Club])
def recommended_clubs(
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> list[Club]:
    return recommend_clubs(user, store.list_clubs())


@app.get("/api/clubs/following", response_model=list[Club])
def followed_clubs(
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> list[Club]:
    club_ids = {f.club_id for f in store.list_club_followers_by_user(user.id)}
    return [c for c in store.list_clubs() if c.id in club_ids]


@app.get("/api/clubs/{club_id}", response_model=Club)
def get_club(club_id: int, store: EventStore = Depends(get_store)) -> Club:
    return _get_club_or_404(store, club_id)


@app.post("/api/clubs", response_model=Club, status_code=201)
def create_club(
    body: ClubCreate,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> Club:
    return store.create_club(body)


@app.post("/api/clubs/{club_id}/follow", response_model=ClubFollower, status_code=201)
def follow_club(
    club_id: int,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> ClubFollower:
    _get_club_or_404(store, club_id)
    return store.follow_club(club_id, user.id)


@app.delete("/api/clubs/{club_id}/follow")
def unfollow_club(
    club_id: int,
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> dict:
    if not store.unfollow_club(club_id, user.id):
        raise HTTPException(status_code=404, detail="Not following this club")
    return {"status": "unfollowed"}


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.get("/api/recommendations", response_model=RecommendationResponse)
def recommendations(
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
    config: LLMConfig = Depends(get_llm_config),
) -> RecommendationResponse:
    return get_event_recommendations(user, store.list_events(), config=config)


@app.get("/api/organizer/dashboard", response_model=OrganizerDashboard)
def organizer_dashboard(
    user: User = Depends(require_user),
    store: EventStore = Depends(get_store),
) -> OrganizerDashboard:
    return summarize_organizer_events(store.list_events_by_organizer(user.id))


@app.get("/api/analytics/recommendations")
def recommendation_analytics(user: User = Depends(require_user)) -> dict:
    return compute_recommendation_analytics(get_events())
