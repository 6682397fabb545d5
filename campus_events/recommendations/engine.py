from __future__ import annotations

import logging
import random
import time

from ..analytics.store import record_event
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import ExternalModelError, rank_events
from ..storage.models import Event, User
from .models import (
    MAX_RECOMMENDATIONS,
    FallbackReason,
    Recommendation,
    RecommendationResponse,
    Strategy,
)
from .scoring import basic_recommendations

logger = logging.getLogger(__name__)


def _external_recommendations(
    user: User,
    events: list[Event],
    config: LLMConfig,
) -> list[Recommendation]:
    """Join the model's entries back to known events, in the model's order."""
    by_id = {event.id: event for event in events}
    results: list[Recommendation] = []
    for item in rank_events(user, events, config=config):
        event = by_id.get(item.event_id)
        if event is None:
            continue
        results.append(Recommendation(
            event=event,
            match_percentage=item.match_percentage,
            match_reason=item.match_reason,
        ))
    return results[:MAX_RECOMMENDATIONS]


def get_event_recommendations(
    user: User,
    events: list[Event],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    rng: random.Random | None = None,
) -> RecommendationResponse:
    """
    Rank events for a user, preferring the external model.

    Without a usable credential, or on any model failure, the deterministic
    scorer answers instead and the response names the fallback reason.
    """
    start_time = time.time()

    fallback_reason: FallbackReason | None = None
    recommendations: list[Recommendation] | None = None

    if not config.enabled:
        fallback_reason = FallbackReason.disabled
    elif not config.api_key:
        fallback_reason = FallbackReason.missing_credential
    elif events:
        try:
            recommendations = _external_recommendations(user, events, config)
        except ExternalModelError as exc:
            fallback_reason = exc.reason
            logger.warning(
                "External model recommendation failed (%s), falling back to basic ranking",
                exc.reason.value,
                exc_info=True,
            )

    if recommendations is not None:
        strategy = Strategy.external_model
    else:
        if fallback_reason in (FallbackReason.disabled, FallbackReason.missing_credential):
            logger.info("External model unavailable (%s), using basic ranking", fallback_reason.value)
        strategy = Strategy.deterministic
        recommendations = basic_recommendations(user, events, rng=rng)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("recommendation", {
        "user_id": user.id,
        "strategy": strategy.value,
        "fallback_reason": fallback_reason.value if fallback_reason else None,
        "total_events": len(events),
        "results_returned": len(recommendations),
        "response_time_ms": elapsed_ms,
    })

    return RecommendationResponse(
        recommendations=recommendations,
        strategy=strategy,
        fallback_reason=fallback_reason,
    )
