from __future__ import annotations

from enum import Enum

from pydantic import Field

from ..storage.models import CamelModel, Event

MAX_RECOMMENDATIONS = 5


class Strategy(str, Enum):
    external_model = "external_model"
    deterministic = "deterministic"


class FallbackReason(str, Enum):
    disabled = "disabled"
    missing_credential = "missing_credential"
    timeout = "timeout"
    api_error = "api_error"
    empty_response = "empty_response"
    invalid_json = "invalid_json"
    invalid_shape = "invalid_shape"


class Recommendation(CamelModel):
    event: Event
    match_percentage: int = Field(..., ge=0, le=100)
    match_reason: str


class RecommendationResponse(CamelModel):
    recommendations: list[Recommendation]
    strategy: Strategy
    fallback_reason: FallbackReason | None = None
