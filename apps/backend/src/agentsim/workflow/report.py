"""Execution report model with markdown rendering."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from ..simulator.state import ExecutionStep, WorkflowExecution
from .schema import Workflow


class ExecutionReport(BaseModel):
    """Summary of one workflow execution."""

    execution_id: str
    workflow_id: str
    workflow_name: str
    agent_id: str
    status: str
    contributor: str
    repository: str
    total_steps: int
    completed: int
    failed: int
    waiting_approval: int
    pending: int
    steps: list[ExecutionStep]
    started_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_execution(cls, execution: WorkflowExecution, workflow: Workflow | None = None) -> ExecutionReport:
        counts = {"completed": 0, "failed": 0, "waiting_approval": 0, "pending": 0}
        for step in execution.steps:
            if step.status in counts:
                counts[step.status] += 1

        repo = execution.context.repository
        return cls(
            execution_id=execution.id,
            workflow_id=execution.workflow_id,
            workflow_name=workflow.name if workflow is not None else execution.workflow_id,
            agent_id=execution.agent_id,
            status=execution.status,
            contributor=execution.context.contributor.username,
            repository=f"{repo.owner}/{repo.name}",
            total_steps=len(execution.steps),
            steps=[step.model_copy(deep=True) for step in execution.steps],
            started_at=execution.start_time,
            completed_at=execution.end_time,
            **counts,
        )

    def to_markdown(self) -> str:
        lines = [
            f"# Execution Report: {self.workflow_name}",
            "",
            f"**Execution ID:** `{self.execution_id}`",
            f"**Agent:** `{self.agent_id}`",
            f"**Status:** {self.status}",
            f"**Contributor:** {self.contributor}",
            f"**Repository:** {self.repository}",
            f"**Total steps:** {self.total_steps}",
            f"**Completed:** {self.completed}",
            f"**Failed:** {self.failed}",
            f"**Waiting approval:** {self.waiting_approval}",
            f"**Pending:** {self.pending}",
            "",
        ]

        lines.append("## Steps")
        lines.append("")
        lines.append("| # | Step | Type | Status | Detail |")
        lines.append("|---|------|------|--------|--------|")

        for i, step in enumerate(self.steps, 1):
            detail = ""
            if step.error:
                detail = step.error
            elif step.approval_request is not None:
                approval = step.approval_request
                detail = f"{approval.title} ({approval.status})"
                if approval.comments:
                    detail += f": {approval.comments}"
            elif step.output and "data" in step.output:
                detail = str(step.output["data"])

            status_icon = {
                "completed": "OK",
                "failed": "FAIL",
                "waiting_approval": "WAIT",
                "pending": "-",
                "running": "RUN",
            }.get(step.status, step.status)
            lines.append(f"| {i} | `{step.id}` {step.name} | {step.type} | {status_icon} | {detail} |")

        lines.append("")
        if self.completed_at:
            duration = (self.completed_at - self.started_at).total_seconds()
            lines.append(f"**Duration:** {duration:.2f}s")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
