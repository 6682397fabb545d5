from __future__ import annotations

from collections import Counter
from typing import Any


def compute_recommendation_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    runs = [e for e in events if e["type"] == "recommendation"]
    total = len(runs)

    # Average response time
    times = [r["response_time_ms"] for r in runs if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    strategy_counter: Counter[str] = Counter(r.get("strategy", "unknown") for r in runs)

    # Why the external model did not answer
    reason_counter: Counter[str] = Counter(
        r["fallback_reason"] for r in runs if r.get("fallback_reason")
    )

    external = strategy_counter.get("external_model", 0)
    empty_results = sum(1 for r in runs if r.get("results_returned", 0) == 0)

    return {
        "total_runs": total,
        "avg_response_time_ms": avg_time,
        "strategies": dict(strategy_counter),
        "fallback_reasons": dict(reason_counter),
        "external_model_rate": round(external / total * 100, 1) if total else 0.0,
        "empty_results": empty_results,
    }
