from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: bool = True) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class LLMConfig:
    """
    Settings for the external event-ranking model.

    A blank ``api_key`` or ``enabled=False`` sends every recommendation
    request straight to the deterministic scorer without a network call.
    ``timeout`` bounds the single Groq attempt.
    """

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    timeout: float = float(os.getenv("GROQ_TIMEOUT", "10"))
    max_tokens: int = 1024
    enabled: bool = _env_flag("RECOMMENDATIONS_LLM_ENABLED")


DEFAULT_LLM_CONFIG = LLMConfig()
