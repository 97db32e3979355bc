import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

JOURNAL_MODES = {"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"}


def default_datasource() -> str:
    """Scratch database in the system temp directory."""
    return f"sqlite:{Path(tempfile.gettempdir()) / 'feedstore-scratch.db'}"


class Config(BaseModel):
    # Database Configuration
    datasource: str = default_datasource()
    timeout: float = 5.0  # Seconds to wait on a locked database
    journal_mode: str = "WAL"
    statement_cache_size: int = 128  # Driver-side compiled statement cache

    @field_validator("journal_mode")
    @classmethod
    def validate_journal_mode(cls, value: str) -> str:
        mode = value.upper()
        if mode not in JOURNAL_MODES:
            raise ValueError(f"journal_mode must be one of {sorted(JOURNAL_MODES)}")
        return mode

    def merge(self, overrides: Optional[Dict[str, Any]] = None) -> "Config":
        """Return a copy with the supplied settings applied over this one."""
        return Config(**{**self.model_dump(), **(overrides or {})})


def load_config(env_file: Optional[str] = None) -> Config:
    """Load configuration from environment variables and .env file"""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    config_data = {
        "datasource": os.getenv("FEEDSTORE_DATASOURCE", default_datasource()),
        "timeout": float(os.getenv("FEEDSTORE_TIMEOUT", "5.0")),
        "journal_mode": os.getenv("FEEDSTORE_JOURNAL_MODE", "WAL"),
        "statement_cache_size": int(os.getenv("FEEDSTORE_STATEMENT_CACHE_SIZE", "128")),
    }

    return Config(**config_data)