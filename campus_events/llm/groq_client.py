from __future__ import annotations

import json
import logging

from groq import APITimeoutError, Groq
from pydantic import BaseModel, Field, ValidationError

from ..recommendations.models import MAX_RECOMMENDATIONS, FallbackReason
from ..storage.models import Event, User
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant for a campus event discovery platform. "
    "Given a student's profile and a list of events, recommend the most "
    "relevant events for this student.\n\n"
    "For each event, determine a match percentage (0-100) based on how relevant "
    "it is to the student's major, year and interests, and a brief reason "
    "explaining why it is a good match.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"recommendations": [{"eventId": <number>, "matchPercentage": <number>, '
    '"matchReason": "<one sentence>"}]}\n'
    f"Limit to {MAX_RECOMMENDATIONS} events with the highest match percentage. "
    "Include only events from the provided list. "
    "Sort by match percentage in descending order."
)


class ExternalModelError(Exception):
    """The model call failed or its reply broke the wire contract."""

    def __init__(self, reason: FallbackReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class ModelRecommendation(BaseModel):
    event_id: int = Field(..., alias="eventId")
    match_percentage: int = Field(..., alias="matchPercentage", ge=0, le=100)
    match_reason: str = Field(..., alias="matchReason")


class ModelReply(BaseModel):
    recommendations: list[ModelRecommendation]


def _build_user_message(user: User, events: list[Event]) -> str:
    lines = ["## Student Profile"]
    lines.append(f"- Name: {user.name}")
    lines.append(f"- Major: {user.major}")
    lines.append(f"- Year: {user.year}")
    lines.append(f"- Interests: {', '.join(user.interests)}")

    lines.append("\n## Available Events")
    for index, event in enumerate(events, start=1):
        lines.append(f"\nEvent {index}:")
        lines.append(f"- ID: {event.id}")
        lines.append(f"- Title: {event.title}")
        lines.append(f"- Description: {event.description}")
        lines.append(f"- Categories: {', '.join(event.categories)}")
        lines.append(f"- Date: {event.date}")
        lines.append(f"- Time: {event.time}")
        lines.append(f"- Location: {event.location}")

    return "\n".join(lines)


def rank_events(
    user: User,
    events: list[Event],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> list[ModelRecommendation]:
    """
    Ask the Groq LLM to score events for a user.

    Returns the model's entries in the order it produced them. Raises
    ``ExternalModelError`` tagged with a ``FallbackReason`` on timeout,
    transport/API errors, empty content, unparseable JSON or a reply that
    does not match ``{"recommendations": [{eventId, matchPercentage, matchReason}]}``.
    """
    client = None
    try:
        # One attempt only; a failure falls back to basic ranking
        client = Groq(api_key=config.api_key, timeout=config.timeout, max_retries=0)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": _build_user_message(user, events)},
            ],
            max_tokens=config.max_tokens,
            temperature=0.3,
            response_format={"type": "json_object"},
        )
    except APITimeoutError as exc:
        raise ExternalModelError(
            FallbackReason.timeout, f"Groq call timed out after {config.timeout}s"
        ) from exc
    except Exception as exc:
        raise ExternalModelError(FallbackReason.api_error, f"Groq call failed: {exc}") from exc
    finally:
        if client is not None:
            client.close()

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise ExternalModelError(FallbackReason.empty_response, "Groq returned no content")

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ExternalModelError(FallbackReason.invalid_json, "Groq reply is not JSON") from exc

    try:
        reply = ModelReply.model_validate(parsed)
    except ValidationError as exc:
        raise ExternalModelError(
            FallbackReason.invalid_shape, "Groq reply does not match the recommendations schema"
        ) from exc

    logger.debug("Groq returned %d recommendations", len(reply.recommendations))
    return reply.recommendations
