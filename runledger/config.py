"""
Runtime configuration for RunLedger.

All settings come from environment variables (optionally loaded from a
.env file):
- DATABASE_URL: SQLAlchemy URL of the execution store
- EXECUTIONS_COUNT_ESTIMATE_THRESHOLD: live-row estimate above which
  unfiltered counts are reported as estimated (default: 100000)
- LOG_LEVEL / JSON_LOGS / LOG_FILE: see core.logging_config
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_COUNT_ESTIMATE_THRESHOLD = 100_000


def normalize_database_url(url: Optional[str]) -> Optional[str]:
    """Fix Heroku/Railway style URLs (postgres:// -> postgresql://)"""
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the environment."""

    database_url: Optional[str] = None
    count_estimate_threshold: int = DEFAULT_COUNT_ESTIMATE_THRESHOLD
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=normalize_database_url(os.getenv("DATABASE_URL")),
            count_estimate_threshold=_int_from_env(
                "EXECUTIONS_COUNT_ESTIMATE_THRESHOLD", DEFAULT_COUNT_ESTIMATE_THRESHOLD
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
            log_file=os.getenv("LOG_FILE") or None,
        )
