import json
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import httpx
import pytest
from groq import APITimeoutError

from campus_events.llm.config import LLMConfig, _env_flag
from campus_events.llm.groq_client import ExternalModelError, _build_user_message, rank_events
from campus_events.recommendations.models import FallbackReason
from campus_events.storage.models import Event, User

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)

SAMPLE_USER = User(
    id=1,
    username="alex",
    password_hash="x",
    name="Alex Kim",
    major="Computer Science",
    year="3rd Year",
    interests=["Technology", "Sports"],
    created_at=NOW,
)

SAMPLE_EVENTS = [
    Event(
        id=1, title="Technology Career Fair", description="Meet recruiters.",
        date="Tomorrow", time="2:00-5:00 PM", location="Myhal Centre",
        categories=["Career", "Technology"], organizer="Career Centre", created_at=NOW,
    ),
    Event(
        id=2, title="Campus Concert Series", description="Live music.",
        date="Saturday", time="7:00-10:00 PM", location="Hart House",
        categories=["Music", "Arts"], organizer="Hart House", created_at=NOW,
    ),
]

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)


def _mock_groq_response(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.mark.parametrize(
    "raw, expected",
    [(None, True), ("", True), ("1", True), ("true", True), ("0", False), ("False", False), (" off ", False)],
)
def test_enabled_flag_from_env(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("RECOMMENDATIONS_LLM_ENABLED", raising=False)
    else:
        monkeypatch.setenv("RECOMMENDATIONS_LLM_ENABLED", raw)

    assert _env_flag("RECOMMENDATIONS_LLM_ENABLED") is expected


def test_user_message_lists_profile_and_events():
    message = _build_user_message(SAMPLE_USER, SAMPLE_EVENTS)

    assert "- Major: Computer Science" in message
    assert "- Interests: Technology, Sports" in message
    assert "- ID: 2" in message
    assert "- Categories: Music, Arts" in message


@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_returns_entries_in_model_order(mock_groq_cls):
    llm_response = json.dumps({
        "recommendations": [
            {"eventId": 2, "matchPercentage": 60, "matchReason": "Unwind with live music."},
            {"eventId": 1, "matchPercentage": 95, "matchReason": "Great for a CS student."},
        ]
    })
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(llm_response)

    result = rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=ENABLED_CONFIG)

    assert [r.event_id for r in result] == [2, 1]
    assert result[1].match_percentage == 95
    assert result[1].match_reason == "Great for a CS student."

    kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    mock_groq_cls.assert_called_once_with(
        api_key="test-key", timeout=ENABLED_CONFIG.timeout, max_retries=0
    )


@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("connection reset")

    with pytest.raises(ExternalModelError) as exc_info:
        rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=ENABLED_CONFIG)

    assert exc_info.value.reason == FallbackReason.api_error


@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_single_attempt_and_client_closed(mock_groq_cls):
    config = LLMConfig(api_key="test-key", timeout=2.5)
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("503")

    with pytest.raises(ExternalModelError):
        rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=config)

    kwargs = mock_groq_cls.call_args.kwargs
    assert kwargs["max_retries"] == 0
    assert kwargs["timeout"] == 2.5
    assert mock_groq_cls.return_value.chat.completions.create.call_count == 1
    mock_groq_cls.return_value.close.assert_called_once()


@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_timeout(mock_groq_cls):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    mock_groq_cls.return_value.chat.completions.create.side_effect = APITimeoutError(request=request)

    with pytest.raises(ExternalModelError) as exc_info:
        rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=ENABLED_CONFIG)

    assert exc_info.value.reason == FallbackReason.timeout


@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_empty_content(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(None)

    with pytest.raises(ExternalModelError) as exc_info:
        rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=ENABLED_CONFIG)

    assert exc_info.value.reason == FallbackReason.empty_response


@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_bad_json(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("not valid json{{{")

    with pytest.raises(ExternalModelError) as exc_info:
        rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=ENABLED_CONFIG)

    assert exc_info.value.reason == FallbackReason.invalid_json


@pytest.mark.parametrize(
    "payload",
    [
        {"events": []},
        [{"eventId": 1, "matchPercentage": 90, "matchReason": "Bare array"}],
        {"recommendations": [{"eventId": 1, "matchReason": "No score"}]},
        {"recommendations": [{"eventId": 1, "matchPercentage": 140, "matchReason": "Too high"}]},
        {"recommendations": [{"eventId": "first", "matchPercentage": 80, "matchReason": "Bad id"}]},
    ],
)
@patch("campus_events.llm.groq_client.Groq")
def test_rank_events_invalid_shape(mock_groq_cls, payload):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
        json.dumps(payload)
    )

    with pytest.raises(ExternalModelError) as exc_info:
        rank_events(SAMPLE_USER, SAMPLE_EVENTS, config=ENABLED_CONFIG)

    assert exc_info.value.reason == FallbackReason.invalid_shape
