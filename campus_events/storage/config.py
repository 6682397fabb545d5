from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StorageConfig:
    """
    Storage backend selection.

    An empty ``database_url`` selects the in-memory store.
    """

    database_url: str = os.getenv("DATABASE_URL", "")
    seed_sample_data: bool = os.getenv("SEED_SAMPLE_DATA", "1") not in ("0", "false", "False")


DEFAULT_STORAGE_CONFIG = StorageConfig()
