"""Configuration for Wasteland."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Config:
    """Application configuration."""

    log_level: str = "INFO"
    log_file: Path | None = None
    json_logs: bool = False
    data_file: Path | None = None
    persist_locations: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        log_file = os.getenv("WASTELAND_LOG_FILE")
        data_file = os.getenv("WASTELAND_DATA_FILE")

        return cls(
            log_level=os.getenv("WASTELAND_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=os.getenv("WASTELAND_JSON_LOGS", "").lower()
            in ("true", "1", "yes"),
            data_file=Path(data_file) if data_file else None,
            persist_locations=os.getenv("WASTELAND_PERSIST_LOCATIONS", "").lower()
            in ("true", "1", "yes"),
        )
