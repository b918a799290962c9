"""Community agent simulation engine and its supporting models."""

from __future__ import annotations

import random

from ..config import Settings, get_settings
from ..workflow.definitions import SIMULATION_ACTIONS
from .engine import SimulationEngine
from .errors import (
    AgentBusyError,
    ApprovalNotFoundError,
    SimulationError,
    SimulationNotStartedError,
    UnknownAgentError,
    UnknownWorkflowError,
)
from .failures import FailureConfig, FailureRule


def create_engine(
    settings: Settings | None = None,
    failure_config: FailureConfig | None = None,
    rng: random.Random | None = None,
) -> SimulationEngine:
    """Create an engine configured from settings with the built-in simulation actions."""
    settings = settings or get_settings()
    return SimulationEngine(
        step_delay_ms=(settings.step_delay_min_ms, settings.step_delay_max_ms),
        max_event_history=settings.max_event_history,
        allow_concurrent_agent_runs=settings.allow_concurrent_agent_runs,
        actions=SIMULATION_ACTIONS,
        failure_config=failure_config,
        rng=rng,
    )


__all__ = [
    "AgentBusyError",
    "ApprovalNotFoundError",
    "FailureConfig",
    "FailureRule",
    "SimulationEngine",
    "SimulationError",
    "SimulationNotStartedError",
    "UnknownAgentError",
    "UnknownWorkflowError",
    "create_engine",
]
