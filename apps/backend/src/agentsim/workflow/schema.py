"""Pydantic models defining workflow templates."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

AgentType = Literal["welcome", "contribution", "triage"]
StepType = Literal["automated", "human_approval", "data_collection", "notification"]
ApprovalAction = Literal["approve", "reject", "modify", "skip"]


class ApprovalOption(BaseModel):
    """One choice offered to the human reviewing an approval."""

    id: str
    label: str
    description: str
    action: ApprovalAction


DEFAULT_APPROVAL_OPTIONS = [
    ApprovalOption(id="approve", label="Approve", description="Continue with the workflow", action="approve"),
    ApprovalOption(id="reject", label="Reject", description="Stop the workflow", action="reject"),
]


class StepConfig(BaseModel):
    """Settings shared by every step type.

    Unknown keys are kept as free-form simulation parameters.
    """

    model_config = ConfigDict(extra="allow")

    timeout: int | None = None  # minutes
    retry_attempts: int | None = None
    simulation_action: str | None = None


class AutomatedStepConfig(StepConfig):
    automation_script: str | None = None


class ApprovalStepConfig(StepConfig):
    approval_message: str | None = None
    approval_options: list[ApprovalOption] | None = None


class DataCollectionStepConfig(StepConfig):
    data_fields: list[str] = []


class NotificationStepConfig(StepConfig):
    notification_template: str | None = None
    channels: list[str] = []


STEP_CONFIG_TYPES: dict[str, type[StepConfig]] = {
    "automated": AutomatedStepConfig,
    "human_approval": ApprovalStepConfig,
    "data_collection": DataCollectionStepConfig,
    "notification": NotificationStepConfig,
}


class WorkflowStep(BaseModel):
    """A single step in a workflow template."""

    id: str
    name: str
    description: str
    type: StepType
    config: StepConfig = Field(default_factory=StepConfig, validate_default=True)
    dependencies: list[str] = []  # step ids that must be completed first
    estimated_duration: int = 1  # minutes
    simulated_action: str | None = None
    human_decision: str | None = None

    @field_validator("config", mode="before")
    @classmethod
    def _coerce_config(cls, value: Any, info: ValidationInfo) -> Any:
        config_cls = STEP_CONFIG_TYPES.get(info.data.get("type"), StepConfig)
        if isinstance(value, config_cls):
            return value
        if isinstance(value, StepConfig):
            value = value.model_dump()
        return config_cls.model_validate(value or {})


class Workflow(BaseModel):
    """An immutable, ordered list of steps run by one agent type."""

    id: str
    name: str
    description: str
    agent_type: AgentType
    steps: list[WorkflowStep]
    estimated_duration: int = 0  # minutes
    trigger_description: str | None = None

    @model_validator(mode="after")
    def _check_step_graph(self) -> Workflow:
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise ValueError(f"Duplicate step id in workflow {self.id}: {step.id}")
            seen.add(step.id)

        for step in self.steps:
            unknown = [dep for dep in step.dependencies if dep not in seen]
            if unknown:
                raise ValueError(
                    f"Step {step.id} depends on unknown steps: {', '.join(unknown)}"
                )
        return self

    def get_step(self, step_id: str) -> WorkflowStep | None:
        return next((step for step in self.steps if step.id == step_id), None)
