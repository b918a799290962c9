from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ------------------------------------------------------------------
    # Simulation timing
    # ------------------------------------------------------------------
    # Each step waits uniform(min, max) milliseconds divided by the speed
    # multiplier passed to start().
    simulation_speed: float = 1.0
    step_delay_min_ms: float = 500.0
    step_delay_max_ms: float = 3000.0

    # ------------------------------------------------------------------
    # Event buffers
    # ------------------------------------------------------------------
    max_event_history: int = 1000   # engine-side log
    ui_event_buffer_size: int = 100  # AgentContext view model

    # ------------------------------------------------------------------
    # Execution policy
    # ------------------------------------------------------------------
    # False: an agent owns at most one running execution at a time.
    # True:  a second execution may start while the first awaits approval.
    allow_concurrent_agent_runs: bool = False

    # ------------------------------------------------------------------
    # HTTP / logging
    # ------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
