"""Failure injection configuration for simulated steps.

The built-in step types never fail on their own. Rules here let a demo or
test force a ``step_error`` on chosen steps.
"""

import random

from pydantic import BaseModel

from ..workflow.schema import WorkflowStep


class FailureRule(BaseModel):
    """Defines how a matching step should fail."""

    error_type: str  # "timeout" | "rate_limit" | "permission_denied"
    message: str
    probability: float = 1.0  # 1.0 = always fail, 0.5 = 50% chance


class FailureConfig(BaseModel):
    """Maps step keys to failure rules.

    A key is either ``"<workflow_id>.<step_id>"``, a bare step id, or a step
    type such as ``"notification"``. The most specific match wins.
    """

    rules: dict[str, FailureRule] = {}

    def should_fail(
        self,
        workflow_id: str,
        step: WorkflowStep,
        rng: random.Random | None = None,
    ) -> FailureRule | None:
        """Check if a step should fail. Returns the rule if it triggers."""
        rule = (
            self.rules.get(f"{workflow_id}.{step.id}")
            or self.rules.get(step.id)
            or self.rules.get(step.type)
        )
        if rule is None:
            return None
        roll = (rng or random).random()
        if roll < rule.probability:
            return rule
        return None
