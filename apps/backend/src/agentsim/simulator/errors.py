"""Precondition errors raised by the simulation engine."""


class SimulationError(Exception):
    """Raised when an engine precondition is not met."""

    def __init__(self, message: str, error_type: str = "precondition_failed"):
        self.error_type = error_type
        super().__init__(message)


class SimulationNotStartedError(SimulationError):
    def __init__(self):
        super().__init__("Simulation not started. Call start() first.", "not_started")


class UnknownAgentError(SimulationError):
    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} not found", "unknown_agent")


class UnknownWorkflowError(SimulationError):
    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(f"Workflow {workflow_id} not found", "unknown_workflow")


class ApprovalNotFoundError(SimulationError):
    def __init__(self, approval_id: str):
        self.approval_id = approval_id
        super().__init__(f"Approval {approval_id} not found or already answered", "approval_not_found")


class AgentBusyError(SimulationError):
    def __init__(self, agent_id: str, execution_id: str):
        self.agent_id = agent_id
        self.execution_id = execution_id
        super().__init__(
            f"Agent {agent_id} is already running execution {execution_id}", "agent_busy"
        )
