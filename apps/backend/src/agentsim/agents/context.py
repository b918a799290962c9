"""UI-facing adapter that keeps a denormalized view of the simulation."""

from __future__ import annotations

import logging
from collections import deque

from pydantic import BaseModel

from ..simulator import SimulationEngine, SimulationError
from ..simulator.events import EventHandler
from ..simulator.state import (
    Agent,
    ApprovalRequest,
    ContributorInfo,
    RepositoryInfo,
    SimulationEvent,
    WorkflowExecution,
)
from ..workflow.definitions import DEFAULT_WORKFLOWS
from .defaults import default_agents

logger = logging.getLogger(__name__)


class AgentState(BaseModel):
    """What presentation components render."""

    agents: list[Agent] = []
    active_workflows: list[WorkflowExecution] = []
    pending_approvals: list[ApprovalRequest] = []
    simulation_events: list[SimulationEvent] = []  # oldest first
    is_simulation_running: bool = False
    simulation_speed: float = 1.0


class AgentContext:
    """Wraps a SimulationEngine for presentation code.

    The view model in ``state`` is rebuilt after every engine event and every
    action. Actions never raise engine precondition errors: they are logged
    and the action reports failure through its return value.
    """

    def __init__(self, engine: SimulationEngine, event_buffer_size: int = 100):
        self.engine = engine
        self.state = AgentState()
        self._events: deque[SimulationEvent] = deque(maxlen=event_buffer_size)
        self._subscription_id: str | None = None

    def initialize(self) -> None:
        """Register the built-in agents and workflows and start listening."""
        for agent in default_agents():
            self.engine.register_agent(agent)
        for workflow in DEFAULT_WORKFLOWS:
            self.engine.register_workflow(workflow)

        if self._subscription_id is None:
            self._subscription_id = self.engine.add_event_listener(self._on_event)
        self.refresh_data()

    def close(self) -> None:
        if self._subscription_id is not None:
            self.engine.remove_event_listener(self._subscription_id)
            self._subscription_id = None

    def _on_event(self, event: SimulationEvent) -> None:
        self._events.append(event)
        self.refresh_data()

    def refresh_data(self) -> None:
        status = self.engine.get_status()
        self.state = AgentState(
            agents=self.engine.get_agents(),
            active_workflows=self.engine.get_active_workflows(),
            pending_approvals=self.engine.get_pending_approvals(),
            simulation_events=list(self._events),
            is_simulation_running=status.is_running and not status.is_paused,
            simulation_speed=status.simulation_speed,
        )

    # === SUBSCRIPTIONS ===

    def subscribe(self, handler: EventHandler) -> str:
        return self.engine.add_event_listener(handler)

    def unsubscribe(self, subscription_id: str) -> bool:
        return self.engine.remove_event_listener(subscription_id)

    # === ACTIONS ===

    def start_simulation(self, speed: float = 1.0) -> None:
        self.engine.start(speed)
        self.refresh_data()

    def stop_simulation(self) -> None:
        self.engine.pause()
        self.refresh_data()

    async def start_workflow(
        self,
        agent_id: str,
        workflow_id: str,
        contributor: ContributorInfo | None = None,
        repository: RepositoryInfo | None = None,
    ) -> WorkflowExecution | None:
        try:
            return await self.engine.execute_workflow(agent_id, workflow_id, contributor, repository)
        except SimulationError as e:
            logger.error("Failed to start workflow %s for %s: %s", workflow_id, agent_id, e)
            return None
        finally:
            self.refresh_data()

    async def respond_to_approval(
        self,
        approval_id: str,
        response: str,
        comments: str | None = None,
    ) -> bool:
        try:
            await self.engine.respond_to_approval(approval_id, response, comments)
            return True
        except SimulationError as e:
            logger.error("Failed to respond to approval %s: %s", approval_id, e)
            return False
        finally:
            self.refresh_data()
