from __future__ import annotations

from datetime import datetime, timezone

from campus_events.analytics.aggregator import compute_recommendation_analytics
from campus_events.analytics.dashboard import summarize_organizer_events
from campus_events.analytics.store import clear_events, get_events, record_event
from campus_events.storage.models import Event

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _event(event_id: int, attendees: int) -> Event:
    return Event(
        id=event_id, title=f"Event {event_id}", description="", date="Friday",
        time="1-2 PM", location="Hart House", organizer="Me", created_at=NOW,
        attendees=attendees,
    )


def _login(c):
    c.post("/api/auth/login", json={"username": "alex", "password": "password123"})


def test_record_and_filter_events():
    clear_events()
    record_event("recommendation", {"strategy": "deterministic"})
    record_event("other", {})

    assert len(get_events()) == 2
    runs = get_events("recommendation")
    assert len(runs) == 1
    assert runs[0]["strategy"] == "deterministic"
    assert "timestamp" in runs[0]


def test_compute_analytics_empty():
    result = compute_recommendation_analytics([])
    assert result["total_runs"] == 0
    assert result["avg_response_time_ms"] == 0.0
    assert result["external_model_rate"] == 0.0
    assert result["strategies"] == {}


def test_compute_analytics_counts_strategies_and_reasons():
    events = [
        {"type": "recommendation", "strategy": "external_model", "fallback_reason": None,
         "results_returned": 5, "response_time_ms": 300.0},
        {"type": "recommendation", "strategy": "deterministic", "fallback_reason": "timeout",
         "results_returned": 5, "response_time_ms": 100.0},
        {"type": "recommendation", "strategy": "deterministic", "fallback_reason": "timeout",
         "results_returned": 0, "response_time_ms": 200.0},
        {"type": "other"},
    ]
    result = compute_recommendation_analytics(events)

    assert result["total_runs"] == 3
    assert result["avg_response_time_ms"] == 200.0
    assert result["strategies"] == {"external_model": 1, "deterministic": 2}
    assert result["fallback_reasons"] == {"timeout": 2}
    assert result["external_model_rate"] == 33.3
    assert result["empty_results"] == 1


def test_dashboard_summary_rounds_half_up():
    summary = summarize_organizer_events([_event(1, 2), _event(2, 1)])
    assert summary.upcoming_events == 2
    assert summary.total_rsvps == 3
    assert summary.avg_rsvps == 2


def test_dashboard_summary_without_events():
    summary = summarize_organizer_events([])
    assert summary.avg_rsvps == 0
    assert summary.events == []


def test_analytics_endpoint(client):
    _login(client)
    client.get("/api/recommendations")
    client.get("/api/recommendations")

    resp = client.get("/api/analytics/recommendations")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_runs"] == 2
    assert body["strategies"] == {"deterministic": 2}
    assert body["fallback_reasons"] == {"disabled": 2}


def test_analytics_requires_login(client):
    assert client.get("/api/analytics/recommendations").status_code == 401
