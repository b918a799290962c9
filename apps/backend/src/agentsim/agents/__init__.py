"""Community agents and the UI-facing context adapter."""

from .context import AgentContext, AgentState
from .defaults import AGENT_WORKFLOWS, default_agents

__all__ = ["AGENT_WORKFLOWS", "AgentContext", "AgentState", "default_agents"]
