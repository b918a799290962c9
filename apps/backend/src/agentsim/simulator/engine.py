"""In-memory engine that runs workflow executions step by step."""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from datetime import datetime
from typing import Any, Literal

from ..workflow.schema import DEFAULT_APPROVAL_OPTIONS, Workflow
from .errors import (
    AgentBusyError,
    ApprovalNotFoundError,
    SimulationNotStartedError,
    UnknownAgentError,
    UnknownWorkflowError,
)
from .events import EventBus, EventHandler
from .failures import FailureConfig
from .generator import (
    generate_contributor,
    generate_issues,
    generate_pull_requests,
    generate_repository,
)
from .state import (
    Agent,
    ApprovalRequest,
    ContributorInfo,
    EventType,
    ExecutionStep,
    RepositoryInfo,
    SimulationEvent,
    SimulationStatus,
    WorkflowContext,
    WorkflowExecution,
)
from .steps import SimulationAction, StepRunner

logger = logging.getLogger(__name__)

ApprovalResponse = Literal["approve", "reject"]


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _event_message(event_type: EventType, data: dict[str, Any]) -> str:
    if event_type == "step_start":
        return f"Started: {data.get('step_name')}"
    if event_type == "step_complete":
        return f"Completed: {data.get('step_name')}"
    if event_type == "step_error":
        return f"Error in: {data.get('step_name')}"
    if event_type == "approval_requested":
        return f"Approval required: {data.get('step_name')}"
    if event_type == "approval_responded":
        return f"Approval response: {data.get('response')}"
    if event_type == "workflow_start":
        return f"Workflow started: {data.get('workflow_name')}"
    if event_type == "workflow_complete":
        return f"Workflow {data.get('status')}: {data.get('workflow_name')}"
    return "Unknown event"


class SimulationEngine:
    """Runs registered workflows for registered agents.

    Executions are driven in step declaration order. Each step is preceded by
    a random delay scaled by the simulation speed. A ``human_approval`` step
    suspends its execution until ``respond_to_approval`` is called.

    Dependency scheduling is single-pass: a step whose dependencies are not
    yet completed is skipped for the current drive and only reconsidered the
    next time the execution is driven (after an approval response or a
    resume). A step declared before one of its dependencies therefore never
    runs in the same drive as that dependency.

    The execution returned by ``execute_workflow`` is the live object; it
    keeps changing as the engine drives it.
    """

    def __init__(
        self,
        *,
        step_delay_ms: tuple[float, float] = (500.0, 3000.0),
        max_event_history: int = 1000,
        allow_concurrent_agent_runs: bool = False,
        actions: dict[str, SimulationAction] | None = None,
        failure_config: FailureConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.step_delay_ms = step_delay_ms
        self.allow_concurrent_agent_runs = allow_concurrent_agent_runs
        self.failure_config = failure_config
        self._rng = rng or random.Random()
        self._runner = StepRunner(actions, self._rng)
        self.event_bus = EventBus(max_history=max_event_history)

        self._agents: dict[str, Agent] = {}
        self._workflows: dict[str, Workflow] = {}
        self._executions: dict[str, WorkflowExecution] = {}
        self._pending_approvals: dict[str, ApprovalRequest] = {}
        # Executions whose drive stopped because the simulation was paused
        self._halted: list[str] = []

        self._running = False
        self._paused = False
        self._speed = 1.0
        # Bumped by reset() so drives started earlier stop at their next checkpoint
        self._generation = 0

    # === EVENTS ===

    def add_event_listener(self, listener: EventHandler) -> str:
        """Subscribe to every event. Returns a subscription id."""
        return self.event_bus.subscribe(listener)

    def remove_event_listener(self, listener: EventHandler | str) -> bool:
        """Remove a listener by subscription id or by the callable itself."""
        sub_id = listener if isinstance(listener, str) else self.event_bus.find_subscription(listener)
        if sub_id is None:
            return False
        return self.event_bus.unsubscribe(sub_id)

    def _emit(
        self,
        event_type: EventType,
        execution: WorkflowExecution,
        step: ExecutionStep | None = None,
        **data: Any,
    ) -> SimulationEvent:
        if step is not None:
            data = {"step_id": step.id, "step_name": step.name, **data}

        event = SimulationEvent(
            id=_new_id("event"),
            type=event_type,
            workflow_execution_id=execution.id,
            agent_id=execution.agent_id,
            step_id=step.id if step is not None else None,
            data=data,
            message=_event_message(event_type, data),
        )
        self.event_bus.publish(event)
        return event

    # === REGISTRATION ===

    def register_agent(self, agent: Agent) -> None:
        self._agents[agent.id] = agent

    def register_workflow(self, workflow: Workflow) -> None:
        self._workflows[workflow.id] = workflow

    # === RUN-STATE CONTROL ===

    def start(self, speed: float = 1.0) -> None:
        if speed <= 0:
            raise ValueError(f"Simulation speed must be positive, got {speed}")
        self._speed = speed
        self._running = True
        self._paused = False
        logger.info("Simulation started at %sx speed", speed)

    def pause(self) -> None:
        self._paused = True
        logger.info("Simulation paused")

    async def resume(self) -> None:
        """Clear the pause flag and drive every execution halted by the pause.

        Halted executions are driven concurrently, so one execution's step
        delays do not hold back the others.
        """
        self._paused = False
        logger.info("Simulation resumed")

        halted, self._halted = self._halted, []
        executions = [self._executions.get(execution_id) for execution_id in halted]
        await asyncio.gather(
            *(
                self._execute_steps(execution)
                for execution in executions
                if execution is not None and execution.status == "running"
            )
        )

    def reset(self) -> None:
        """Drop all runtime state. Registered agents and workflows are kept."""
        self._running = False
        self._paused = False
        self._speed = 1.0
        self._generation += 1
        self._executions.clear()
        self._pending_approvals.clear()
        self._halted = []
        self.event_bus.clear()

        for agent in self._agents.values():
            agent.status = "idle"
            agent.current_workflow = None
        logger.info("Simulation reset")

    # === EXECUTION ===

    async def execute_workflow(
        self,
        agent_id: str,
        workflow_id: str,
        contributor: ContributorInfo | None = None,
        repository: RepositoryInfo | None = None,
    ) -> WorkflowExecution:
        """Start a workflow and drive it until it completes or waits for approval."""
        if not self._running:
            raise SimulationNotStartedError()

        agent = self._agents.get(agent_id)
        if agent is None:
            raise UnknownAgentError(agent_id)
        workflow = self._workflows.get(workflow_id)
        if workflow is None:
            raise UnknownWorkflowError(workflow_id)

        active = agent.current_workflow
        if (
            not self.allow_concurrent_agent_runs
            and active is not None
            and active.status == "running"
            and active.id in self._executions
        ):
            raise AgentBusyError(agent_id, active.id)

        execution = WorkflowExecution(
            id=_new_id("exec"),
            workflow_id=workflow.id,
            agent_id=agent.id,
            status="running",
            steps=[ExecutionStep.from_template(step) for step in workflow.steps],
            context=WorkflowContext(
                contributor=contributor or generate_contributor(self._rng),
                repository=repository or generate_repository(self._rng),
                metadata={
                    "issues": [issue.model_dump() for issue in generate_issues(3, self._rng)],
                    "pull_requests": [pr.model_dump() for pr in generate_pull_requests(2, self._rng)],
                },
            ),
        )
        self._executions[execution.id] = execution

        agent.status = "running"
        agent.current_workflow = execution
        agent.metrics.last_activity = execution.start_time

        logger.info("Execution %s started: %s for agent %s", execution.id, workflow.id, agent.id)
        self._emit(
            "workflow_start",
            execution,
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            contributor=execution.context.contributor.username,
            repository=f"{execution.context.repository.owner}/{execution.context.repository.name}",
        )

        await self._execute_steps(execution)
        return execution

    def _is_live(self, execution: WorkflowExecution, generation: int) -> bool:
        return (
            self._running
            and generation == self._generation
            and execution.status == "running"
        )

    @staticmethod
    def _dependencies_met(execution: WorkflowExecution, step: ExecutionStep) -> bool:
        for dep_id in step.dependencies:
            dep = execution.get_step(dep_id)
            if dep is None or dep.status != "completed":
                return False
        return True

    async def _execute_steps(self, execution: WorkflowExecution) -> None:
        """Drive one pass over the execution's steps in declaration order."""
        generation = self._generation

        for index, step in enumerate(execution.steps):
            if not self._is_live(execution, generation):
                return
            if self._paused:
                if execution.id not in self._halted:
                    self._halted.append(execution.id)
                return

            execution.current_step_index = index
            if step.status != "pending":
                continue
            if not self._dependencies_met(execution, step):
                logger.debug("Deferring %s: dependencies not completed", step.id)
                continue

            await self._execute_step(execution, step, generation)

            if not self._is_live(execution, generation):
                return
            if step.status == "waiting_approval":
                break

        if all(step.status == "completed" for step in execution.steps):
            self._complete_workflow(execution, "completed")
        elif all(step.status in ("completed", "failed") for step in execution.steps):
            self._complete_workflow(execution, "failed")

    def _step_delay(self) -> float:
        low, high = self.step_delay_ms
        delay_ms = self._rng.uniform(low, high) if high > low else low
        return max(delay_ms, 0.0) / self._speed / 1000

    async def _execute_step(
        self, execution: WorkflowExecution, step: ExecutionStep, generation: int
    ) -> None:
        step.status = "running"
        step.start_time = datetime.now()
        self._emit("step_start", execution, step, step_type=step.type)

        await asyncio.sleep(self._step_delay())
        if not self._is_live(execution, generation):
            return

        logger.debug("Dispatching %s step %s in %s", step.type, step.id, execution.id)
        if step.type == "human_approval":
            self._request_approval(execution, step)
            return

        rule = None
        if self.failure_config is not None:
            rule = self.failure_config.should_fail(execution.workflow_id, step, self._rng)
        if rule is not None:
            self._fail_step(execution, step, f"[{rule.error_type}] {rule.message}")
            return

        try:
            output = self._runner.run(step, execution.context)
        except Exception as e:
            logger.exception("Step %s failed in %s", step.id, execution.id)
            self._fail_step(execution, step, str(e))
            return

        step.output = output
        step.status = "completed"
        step.end_time = datetime.now()
        self._emit("step_complete", execution, step, output=output)

    def _fail_step(self, execution: WorkflowExecution, step: ExecutionStep, error: str) -> None:
        step.status = "failed"
        step.error = error
        step.end_time = datetime.now()
        logger.warning("Step %s in %s failed: %s", step.id, execution.id, error)

        self._emit("step_error", execution, step, error=error)
        self._complete_workflow(execution, "failed")

    def _request_approval(self, execution: WorkflowExecution, step: ExecutionStep) -> None:
        options = getattr(step.config, "approval_options", None) or DEFAULT_APPROVAL_OPTIONS
        approval = ApprovalRequest(
            id=_new_id("approval"),
            step_id=step.id,
            workflow_execution_id=execution.id,
            agent_id=execution.agent_id,
            title=getattr(step.config, "approval_message", None) or f"Approval required for {step.name}",
            description=step.description,
            options=[option.model_copy() for option in options],
            requested_by=execution.agent_id,
        )

        # The reviewer decides on what the step's simulation action proposes
        proposal = self._runner.simulate_action(step, execution.context)
        if proposal is not None:
            step.output = {"proposal": proposal}

        self._pending_approvals[approval.id] = approval
        step.approval_request = approval
        step.status = "waiting_approval"

        agent = self._agents.get(execution.agent_id)
        if agent is not None and agent.current_workflow is execution:
            agent.status = "waiting_approval"

        self._emit(
            "approval_requested",
            execution,
            step,
            approval_id=approval.id,
            approval_title=approval.title,
        )

    # === APPROVALS ===

    async def respond_to_approval(
        self,
        approval_id: str,
        response: ApprovalResponse,
        comments: str | None = None,
        responder: str | None = None,
    ) -> None:
        """Record a human decision and continue (approve) or fail (reject) the execution."""
        if response not in ("approve", "reject"):
            raise ValueError(f"Response must be 'approve' or 'reject', got {response!r}")

        # Removed before any await so a second response for the same id fails
        approval = self._pending_approvals.pop(approval_id, None)
        if approval is None:
            raise ApprovalNotFoundError(approval_id)

        approved = response == "approve"
        approval.status = "approved" if approved else "rejected"
        approval.response_at = datetime.now()
        approval.response_by = responder or "user"
        approval.comments = comments

        execution = self._executions.get(approval.workflow_execution_id)
        step = execution.get_step(approval.step_id) if execution is not None else None
        if execution is None or step is None or step.status != "waiting_approval":
            logger.warning("Approval %s answered but its step is no longer waiting", approval_id)
            return

        step.status = "completed" if approved else "failed"
        step.end_time = approval.response_at
        if not approved:
            step.error = f"Rejected by {approval.response_by}"

        self._emit(
            "approval_responded",
            execution,
            step,
            approval_id=approval.id,
            response=response,
            comments=comments,
            responder=approval.response_by,
        )
        self._emit("step_complete", execution, step, approval_response=response, comments=comments)

        if approved:
            agent = self._agents.get(execution.agent_id)
            if agent is not None and agent.current_workflow is execution:
                agent.status = "running"
            await self._execute_steps(execution)
        else:
            logger.warning("Approval %s rejected; failing %s", approval_id, execution.id)
            self._complete_workflow(execution, "failed")

    def _complete_workflow(
        self,
        execution: WorkflowExecution,
        status: Literal["completed", "failed"] = "completed",
    ) -> None:
        execution.status = status
        execution.end_time = datetime.now()
        if execution.id in self._halted:
            self._halted.remove(execution.id)

        agent = self._agents.get(execution.agent_id)
        if agent is not None:
            if agent.current_workflow is None or agent.current_workflow is execution:
                agent.status = "idle"
                agent.current_workflow = None

            metrics = agent.metrics
            duration_minutes = (execution.end_time - execution.start_time).total_seconds() / 60
            metrics.total_workflows += 1
            if status == "completed":
                metrics.completed_workflows += 1
            metrics.average_completion_time = (
                metrics.average_completion_time * (metrics.total_workflows - 1) + duration_minutes
            ) / metrics.total_workflows
            metrics.success_rate = round(
                metrics.completed_workflows / metrics.total_workflows * 100, 1
            )
            metrics.last_activity = execution.end_time

        workflow = self._workflows.get(execution.workflow_id)
        logger.info("Execution %s finished: %s", execution.id, status)
        self._emit(
            "workflow_complete",
            execution,
            workflow_id=execution.workflow_id,
            workflow_name=workflow.name if workflow is not None else None,
            status=status,
            duration_ms=int((execution.end_time - execution.start_time).total_seconds() * 1000),
        )

    # === READ-ONLY ACCESSORS ===

    def get_agents(self) -> list[Agent]:
        return list(self._agents.values())

    def get_agent(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    def get_workflows(self) -> list[Workflow]:
        return list(self._workflows.values())

    def get_workflow(self, workflow_id: str) -> Workflow | None:
        return self._workflows.get(workflow_id)

    def get_executions(self) -> list[WorkflowExecution]:
        return list(self._executions.values())

    def get_active_workflows(self) -> list[WorkflowExecution]:
        return [e for e in self._executions.values() if e.status == "running"]

    def get_pending_approvals(self) -> list[ApprovalRequest]:
        return list(self._pending_approvals.values())

    def get_recent_events(self, limit: int = 50) -> list[SimulationEvent]:
        """Most recent events, newest first."""
        return list(reversed(self.event_bus.history(limit)))

    def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        return self._executions.get(execution_id)

    def get_status(self) -> SimulationStatus:
        return SimulationStatus(
            is_running=self._running,
            is_paused=self._paused,
            simulation_speed=self._speed,
            active_executions=len(self.get_active_workflows()),
            pending_approvals=len(self._pending_approvals),
        )
