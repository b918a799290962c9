"""Runtime models owned by the simulation engine."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..workflow.schema import AgentType, ApprovalOption, WorkflowStep

AgentStatus = Literal["idle", "running", "waiting_approval", "completed", "error"]
ExecutionStatus = Literal["pending", "running", "completed", "failed", "paused"]
StepStatus = Literal["pending", "running", "completed", "failed", "waiting_approval"]
ApprovalStatus = Literal["pending", "approved", "rejected", "expired"]
EventType = Literal[
    "step_start",
    "step_complete",
    "step_error",
    "approval_requested",
    "approval_responded",
    "workflow_start",
    "workflow_complete",
]


class ContributorInfo(BaseModel):
    id: str
    username: str
    email: str | None = None
    join_date: datetime
    experience: Literal["beginner", "intermediate", "advanced"]
    interests: list[str] = []
    timezone: str


class RepositoryInfo(BaseModel):
    name: str
    owner: str
    description: str
    language: str
    contributing_guidelines: str | None = None
    code_of_conduct: str | None = None


class Issue(BaseModel):
    id: str
    number: int
    title: str
    state: Literal["open", "closed"]
    labels: list[str] = []
    assignee: str | None = None
    created_at: datetime
    updated_at: datetime


class PullRequest(BaseModel):
    id: str
    number: int
    title: str
    state: Literal["open", "merged"]
    author: str
    reviewers: list[str] = []
    created_at: datetime
    updated_at: datetime


class NotificationPreferences(BaseModel):
    email: bool = True
    slack: bool = False
    in_app: bool = True


class AgentConfig(BaseModel):
    auto_approve: bool = False
    simulation_speed: float = 1.0  # 1-10, higher = faster
    notification_preferences: NotificationPreferences = NotificationPreferences()


class AgentMetrics(BaseModel):
    total_workflows: int = 0
    completed_workflows: int = 0
    average_completion_time: float = 0.0  # minutes
    success_rate: float = 100.0  # percent
    last_activity: datetime = Field(default_factory=datetime.now)


class ApprovalRequest(BaseModel):
    """An outstanding human decision blocking one execution."""

    id: str
    step_id: str
    workflow_execution_id: str
    agent_id: str
    title: str
    description: str
    options: list[ApprovalOption] = []
    requested_by: str
    requested_at: datetime = Field(default_factory=datetime.now)
    status: ApprovalStatus = "pending"
    response_at: datetime | None = None
    response_by: str | None = None
    comments: str | None = None


class ExecutionStep(WorkflowStep):
    """A template step copied into an execution, plus its runtime state."""

    status: StepStatus = "pending"
    start_time: datetime | None = None
    end_time: datetime | None = None
    output: dict[str, Any] | None = None
    error: str | None = None
    approval_request: ApprovalRequest | None = None

    @classmethod
    def from_template(cls, step: WorkflowStep) -> ExecutionStep:
        return cls(
            **step.model_dump(exclude={"config"}),
            config=step.config.model_copy(deep=True),
        )


class WorkflowContext(BaseModel):
    contributor: ContributorInfo
    repository: RepositoryInfo
    metadata: dict[str, Any] = {}


class WorkflowExecution(BaseModel):
    """A live run of a workflow bound to one contributor and repository."""

    id: str
    workflow_id: str
    agent_id: str
    status: ExecutionStatus = "pending"
    start_time: datetime = Field(default_factory=datetime.now)
    end_time: datetime | None = None
    current_step_index: int = 0
    steps: list[ExecutionStep]
    context: WorkflowContext

    def get_step(self, step_id: str) -> ExecutionStep | None:
        return next((step for step in self.steps if step.id == step_id), None)

    @property
    def current_step(self) -> ExecutionStep | None:
        if 0 <= self.current_step_index < len(self.steps):
            return self.steps[self.current_step_index]
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status in ("completed", "failed")


class Agent(BaseModel):
    """A named actor that runs workflows of its type."""

    id: str
    name: str
    description: str
    type: AgentType
    status: AgentStatus = "idle"
    config: AgentConfig = AgentConfig()
    metrics: AgentMetrics = Field(default_factory=AgentMetrics)
    current_workflow: WorkflowExecution | None = None


class SimulationEvent(BaseModel):
    """An append-only record of one state change."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: EventType
    timestamp: datetime = Field(default_factory=datetime.now)
    workflow_execution_id: str
    agent_id: str
    step_id: str | None = None
    data: dict[str, Any] = {}
    message: str


class SimulationStatus(BaseModel):
    is_running: bool
    is_paused: bool
    simulation_speed: float
    active_executions: int
    pending_approvals: int
