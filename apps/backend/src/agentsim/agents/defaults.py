"""The three built-in community agents."""

from ..simulator.state import Agent, AgentConfig, NotificationPreferences


def default_agents() -> list[Agent]:
    """Return fresh agent instances; the engine mutates their status and metrics."""
    return [
        Agent(
            id="welcome-agent",
            name="Welcome & Environment Setup Agent",
            description="Helps new contributors get started with the project",
            type="welcome",
            config=AgentConfig(
                simulation_speed=5,
                notification_preferences=NotificationPreferences(email=True, slack=False, in_app=True),
            ),
        ),
        Agent(
            id="contribution-agent",
            name="First Contribution Facilitator",
            description="Guides contributors through their first contribution",
            type="contribution",
            config=AgentConfig(
                simulation_speed=3,
                notification_preferences=NotificationPreferences(email=True, slack=True, in_app=True),
            ),
        ),
        Agent(
            id="triage-agent",
            name="Smart Triage & Mentorship Agent",
            description="Intelligently triages issues and provides mentorship",
            type="triage",
            config=AgentConfig(
                simulation_speed=4,
                notification_preferences=NotificationPreferences(email=True, slack=True, in_app=True),
            ),
        ),
    ]


# Which built-in workflow each agent runs
AGENT_WORKFLOWS = {
    "welcome-agent": "welcome-setup",
    "contribution-agent": "first-contribution",
    "triage-agent": "smart-triage",
}
