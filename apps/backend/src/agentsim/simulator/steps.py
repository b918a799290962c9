"""Synthetic outputs for the non-interactive step types."""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .state import ExecutionStep, WorkflowContext

SimulationAction = Callable[[WorkflowContext], dict[str, Any]]

DEFAULT_NOTIFICATION_CHANNELS = ["email", "slack"]


class StepRunner:
    """Builds the output payload for automated, data collection and notification steps.

    Dispatch is by step type: ``runner.run(step, context)`` calls the method
    named after ``step.type``. When the step names a known simulation action
    its result is attached under ``"result"``.
    """

    def __init__(
        self,
        actions: dict[str, SimulationAction] | None = None,
        rng: random.Random | None = None,
    ):
        self.actions = actions or {}
        self.rng = rng or random.Random()

    def supports(self, step_type: str) -> bool:
        return step_type != "human_approval" and callable(getattr(self, step_type, None))

    def run(self, step: ExecutionStep, context: WorkflowContext) -> dict[str, Any]:
        handler = getattr(self, step.type, None)
        if handler is None or not self.supports(step.type):
            raise ValueError(f"No output handler for step type {step.type}")

        output = handler(step, context)
        result = self.simulate_action(step, context)
        if result is not None:
            output["result"] = result
        return output

    def simulate_action(self, step: ExecutionStep, context: WorkflowContext) -> dict[str, Any] | None:
        """Run the step's named simulation action, if one is registered."""
        action = self.actions.get(step.config.simulation_action or "")
        if action is None:
            return None
        return action(context)

    def automated(self, step: ExecutionStep, context: WorkflowContext) -> dict[str, Any]:
        return {
            "success": True,
            "data": f"Automated result for {step.name}",
            "timestamp": datetime.now().isoformat(),
            "details": {
                "processed": self.rng.randint(1, 100),
                "errors": self.rng.randrange(3),
                "warnings": self.rng.randrange(5),
            },
        }

    def data_collection(self, step: ExecutionStep, context: WorkflowContext) -> dict[str, Any]:
        contributor = context.contributor
        return {
            "collected": [
                f"User experience: {contributor.experience}",
                f"Interests: {', '.join(contributor.interests)}",
                f"Timezone: {contributor.timezone}",
                f"Repository language: {context.repository.language}",
            ],
            "fields": list(getattr(step.config, "data_fields", [])),
            "timestamp": datetime.now().isoformat(),
            "confidence": round(self.rng.uniform(0.7, 1.0), 3),
        }

    def notification(self, step: ExecutionStep, context: WorkflowContext) -> dict[str, Any]:
        channels = list(getattr(step.config, "channels", [])) or list(DEFAULT_NOTIFICATION_CHANNELS)
        return {
            "sent": True,
            "recipients": [context.contributor.email or "user@example.com"],
            "channels": channels,
            "template": getattr(step.config, "notification_template", None),
            "timestamp": datetime.now().isoformat(),
            "message_id": f"msg-{uuid.uuid4().hex[:12]}",
        }
