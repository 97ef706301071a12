# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class UpdateAudience(str, Enum):
    """Select who receives ``order_update`` events.

    ``ALL`` delivers every status change to every connected endpoint.
    ``OWNER`` narrows delivery to the admin room plus the room of the
    customer who placed the order. The default application setting is
    ``ALL``.
    """

    ALL = "all"
    OWNER = "owner"


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "dev"
    log_level: str = "INFO"
    admin_room: str = "admins"
    update_audience: UpdateAudience = UpdateAudience.ALL
    queue_max: int = 100
    heartbeat_secs: int = 30
    max_conn_per_ip: int = 20
    allowed_origins: list[str] = ["*"]
    error_dsn: str | None = None
    menu: list[dict] = []


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. The result is cached to prevent repeated disk reads.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    # Environment variables override values from the JSON file.
    return Settings(**merged)
