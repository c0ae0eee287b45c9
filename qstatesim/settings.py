# qstatesim/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings for the simulator and its front ends.
    """

    # --- Simulation ---
    SEED: int | None = None  # measurement RNG seed; None = fresh entropy
    PROBABILITY_CUTOFF: float = 1e-10  # hide basis states at or below this

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Web UI ---
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    model_config = SettingsConfigDict(
        env_prefix="QSIM_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
