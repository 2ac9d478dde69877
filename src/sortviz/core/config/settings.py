from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Global application-level configuration.

    This class is the single source of truth for:
    - environment selection
    - logging behavior
    - number generation bounds
    - playback cadence and driver
    """

    model_config = SettingsConfigDict(
        env_prefix="SORTVIZ_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # ---- Number generation -------------------------------------------

    max_number: int = Field(
        default=1000,
        ge=1,
        description="Upper bound (inclusive) for generated values",
    )

    min_value: int = Field(
        default=30,
        ge=1,
        description="Drill-down threshold; every generated set holds one value <= this",
    )

    # None means a fresh, unseeded RNG per session
    default_seed: Optional[int] = Field(
        default=None,
        description="Default RNG seed for reproducible sessions",
    )

    # ---- Playback ----------------------------------------------------

    tick_interval_ms: int = Field(
        default=300,
        gt=0,
        description="Delay between two replayed sort steps",
    )

    playback_driver: Literal["asyncio", "manual"] = Field(
        default="asyncio",
        description="asyncio: real timer on the event loop; manual: client-driven ticks",
    )

    mirror_ascending: bool = Field(
        default=True,
        description="Show ascending snapshots reversed (with mirrored highlights)",
    )


# Singleton settings object
settings = AppSettings()
