from __future__ import annotations

from .models import Club, Event, EventFilters


def _contains(haystack: str | None, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def filter_events(events: list[Event], filters: EventFilters) -> list[Event]:
    """Apply the directory filters; every unset filter matches everything."""
    results = []
    for event in events:
        if filters.category and not any(_contains(c, filters.category) for c in event.categories):
            continue
        if filters.location and not _contains(event.location, filters.location):
            continue
        if filters.date and not _contains(event.date, filters.date):
            continue
        if filters.search and not (
            _contains(event.title, filters.search)
            or _contains(event.description, filters.search)
            or _contains(event.organizer, filters.search)
        ):
            continue
        results.append(event)
    return results


def filter_clubs(
    clubs: list[Club],
    category: str | None = None,
    search: str | None = None,
) -> list[Club]:
    results = []
    for club in clubs:
        if category and not any(_contains(c, category) for c in club.categories):
            continue
        if search and not (_contains(club.name, search) or _contains(club.description, search)):
            continue
        results.append(club)
    return results
