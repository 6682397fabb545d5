from __future__ import annotations

import math

from pydantic import Field

from ..storage.models import CamelModel, Event


class OrganizerDashboard(CamelModel):
    upcoming_events: int
    total_rsvps: int
    avg_rsvps: int
    events: list[Event] = Field(default_factory=list)


def summarize_organizer_events(events: list[Event]) -> OrganizerDashboard:
    """Headline numbers for an organizer's own events."""
    total = sum(e.attendees for e in events)
    # Round half up
    avg = math.floor(total / len(events) + 0.5) if events else 0
    return OrganizerDashboard(
        upcoming_events=len(events),
        total_rsvps=total,
        avg_rsvps=avg,
        events=events,
    )
