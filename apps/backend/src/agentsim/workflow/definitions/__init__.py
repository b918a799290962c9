"""Built-in community agent workflows."""

from .contribution import CONTRIBUTION_ACTIONS, CONTRIBUTION_WORKFLOW
from .triage import TRIAGE_ACTIONS, TRIAGE_WORKFLOW
from .welcome import WELCOME_ACTIONS, WELCOME_WORKFLOW

DEFAULT_WORKFLOWS = [WELCOME_WORKFLOW, CONTRIBUTION_WORKFLOW, TRIAGE_WORKFLOW]

SIMULATION_ACTIONS = {**WELCOME_ACTIONS, **CONTRIBUTION_ACTIONS, **TRIAGE_ACTIONS}

__all__ = [
    "CONTRIBUTION_WORKFLOW",
    "DEFAULT_WORKFLOWS",
    "SIMULATION_ACTIONS",
    "TRIAGE_WORKFLOW",
    "WELCOME_WORKFLOW",
]
