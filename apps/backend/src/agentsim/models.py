"""API models for the agent simulator."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .simulator.state import ContributorInfo, RepositoryInfo


class StartSimulationRequest(BaseModel):
    """Request to start (or restart) the simulation clock."""

    speed: Optional[float] = Field(
        None, gt=0, description="Speed multiplier; divides every step delay. Defaults to SIMULATION_SPEED"
    )


class ExecuteWorkflowRequest(BaseModel):
    """Request to run a workflow for an agent."""

    agent_id: str = Field(..., description="Registered agent id, e.g. welcome-agent")
    workflow_id: str = Field(..., description="Registered workflow id, e.g. welcome-setup")
    contributor: Optional[ContributorInfo] = Field(
        None, description="Contributor context; generated when omitted"
    )
    repository: Optional[RepositoryInfo] = Field(
        None, description="Repository context; generated when omitted"
    )


class ApprovalResponseRequest(BaseModel):
    """A human decision on a pending approval."""

    response: Literal["approve", "reject"]
    comments: Optional[str] = None
    responder: Optional[str] = Field(None, description="Who answered; defaults to 'user'")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str = "Agent Simulator Backend"
