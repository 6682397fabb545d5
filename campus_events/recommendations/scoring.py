from __future__ import annotations

import random

from ..storage.models import Club, Event, User
from .models import MAX_RECOMMENDATIONS, Recommendation

INTEREST_POINTS = 20
MAJOR_POINTS = 30
JITTER_RANGE = 10
MIN_SCORE = 50
MAX_SCORE = 100
DEFAULT_REASON = "Recommended event on campus"


def tags_match(a: str, b: str) -> bool:
    """Case-insensitive substring containment in either direction."""
    a, b = a.strip().lower(), b.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def score_event(
    user: User,
    event: Event,
    rng: random.Random | None = None,
) -> Recommendation:
    """Score one event: interest and major overlap, jitter, then clamp."""
    rng = rng or random
    score = 0
    reasons: list[str] = []

    for interest in user.interests:
        for category in event.categories:
            if tags_match(category, interest):
                score += INTEREST_POINTS
                reasons.append(f"Matches your interest in {interest}")
                break

    if any(tags_match(category, user.major) for category in event.categories):
        score += MAJOR_POINTS
        reasons.append(f"Relevant to your major in {user.major}")

    # Variety between requests; inject ``rng`` for repeatable scores
    score += rng.randrange(JITTER_RANGE)
    score = min(max(score, MIN_SCORE), MAX_SCORE)

    return Recommendation(
        event=event,
        match_percentage=score,
        match_reason=". ".join(reasons) or DEFAULT_REASON,
    )


def basic_recommendations(
    user: User,
    events: list[Event],
    rng: random.Random | None = None,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[Recommendation]:
    """Score every event and keep the top ``limit`` by match percentage."""
    scored = [score_event(user, event, rng) for event in events]
    scored.sort(key=lambda r: r.match_percentage, reverse=True)
    return scored[:limit]


def recommend_clubs(user: User, clubs: list[Club]) -> list[Club]:
    """Clubs with at least one category overlapping one of the user's interests."""
    return [
        club
        for club in clubs
        if any(
            tags_match(category, interest)
            for category in club.categories
            for interest in user.interests
        )
    ]
