"""Welcome & Environment Setup workflow.

Trigger: a new contributor joins the repository or makes a first contribution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..schema import Workflow

if TYPE_CHECKING:
    from ...simulator.state import WorkflowContext


WELCOME_WORKFLOW = Workflow.model_validate(
    {
        "id": "welcome-setup",
        "name": "Welcome & Environment Setup",
        "description": "Comprehensive onboarding workflow that welcomes new contributors and sets up their development environment",
        "agent_type": "welcome",
        "estimated_duration": 20,
        "trigger_description": "Automatically triggered when a new contributor joins or makes their first contribution",
        "steps": [
            {
                "id": "welcome-1",
                "name": "Analyze Contributor Profile",
                "description": "Analyze GitHub profile, contribution history, and technical background",
                "type": "data_collection",
                "config": {
                    "data_fields": ["github_username", "public_repos", "languages", "contribution_frequency"],
                    "simulation_action": "analyze_github_profile",
                    "expected_outputs": ["technical_experience", "preferred_languages", "activity_level"],
                },
                "estimated_duration": 2,
                "simulated_action": "Scan GitHub API for contributor profile data, analyze repository contributions, identify primary programming languages, assess contribution patterns and frequency",
            },
            {
                "id": "welcome-2",
                "name": "Send Personalized Welcome",
                "description": "Send customized welcome message based on contributor analysis",
                "type": "notification",
                "config": {
                    "notification_template": "personalized-welcome",
                    "channels": ["email", "slack"],
                    "personalization_fields": ["name", "background", "interests"],
                    "simulation_action": "generate_welcome_message",
                },
                "estimated_duration": 1,
                "simulated_action": "Generate personalized welcome message referencing contributor background, include relevant project links, suggest initial contribution areas based on their skills",
            },
            {
                "id": "welcome-3",
                "name": "Generate Environment Setup Guide",
                "description": "Create personalized development environment setup checklist",
                "type": "automated",
                "config": {
                    "template": "environment-setup",
                    "include_items": ["git_config", "ide_setup", "dependencies", "testing_tools"],
                    "simulation_action": "generate_setup_checklist",
                    "os_detection": True,
                },
                "estimated_duration": 3,
                "simulated_action": "Analyze repository requirements, detect contributor OS (if available), generate step-by-step setup instructions, include verification commands, create personalized checklist",
            },
            {
                "id": "welcome-4",
                "name": "Mentor Assignment Decision",
                "description": "Review and approve mentor assignment based on contributor profile and availability",
                "type": "human_approval",
                "config": {
                    "approval_message": "Please review the suggested mentor assignment for this contributor",
                    "approval_options": [
                        {"id": "approve", "label": "Assign Mentor", "description": "This mentor is a good match for the contributor", "action": "approve"},
                        {"id": "reassign", "label": "Choose Different Mentor", "description": "Select a different mentor from available options", "action": "modify"},
                        {"id": "skip", "label": "Skip Mentor Assignment", "description": "Proceed without assigning a mentor", "action": "skip"},
                    ],
                    "simulation_action": "suggest_mentor",
                    "mentor_criteria": ["experience_match", "timezone_compatibility", "availability"],
                },
                "estimated_duration": 5,
                "simulated_action": "Match contributor with available mentors based on expertise overlap, timezone compatibility, and current workload. Present top 3 mentor options with reasoning.",
                "human_decision": "Choose whether to assign the suggested mentor, select a different one, or skip mentorship",
            },
            {
                "id": "welcome-5",
                "name": "Schedule Onboarding Session",
                "description": "Schedule welcome call with assigned mentor and team",
                "type": "automated",
                "config": {
                    "simulation_action": "schedule_onboarding_call",
                    "duration": 30,
                    "participants": ["contributor", "mentor", "team_lead"],
                    "agenda": ["project_overview", "contribution_process", "q&a"],
                },
                "estimated_duration": 2,
                "simulated_action": "Find available time slots for all participants, generate calendar invitation with project overview and contribution guidelines, send reminders to all attendees",
            },
            {
                "id": "welcome-6",
                "name": "Curate Learning Resources",
                "description": "Send personalized learning materials and documentation",
                "type": "automated",
                "config": {
                    "simulation_action": "curate_resources",
                    "resource_categories": ["getting_started", "project_specific", "best_practices", "tools"],
                    "personalization": True,
                    "format": "email",
                },
                "estimated_duration": 3,
                "simulated_action": "Analyze contributor skill gaps, match resources to experience level, prioritize project-specific documentation, include video tutorials for complex topics, create learning path timeline",
            },
            {
                "id": "welcome-7",
                "name": "Setup Verification Check",
                "description": "Verify development environment is properly configured",
                "type": "data_collection",
                "config": {
                    "simulation_action": "verify_environment",
                    "checks": ["git_config", "dependencies_installed", "tests_running", "ide_integration"],
                    "success_criteria": ["all_checks_pass", "contributor_confirmed"],
                },
                "estimated_duration": 4,
                "simulated_action": "Run automated verification scripts, check if git is configured properly, verify all dependencies are installed, confirm test suite runs successfully, validate IDE integration if applicable",
            },
        ],
    }
)

MENTORS = ["sarah_dev", "mike_ts", "julia_react"]


def analyze_github_profile(context: WorkflowContext) -> dict[str, Any]:
    return {
        "technical_experience": context.contributor.experience,
        "preferred_languages": [context.repository.language],
        "activity_level": "moderate",
        "confidence": 0.85,
    }


def generate_welcome_message(context: WorkflowContext) -> dict[str, Any]:
    interests = ", ".join(context.contributor.interests) or "open source"
    return {
        "message": (
            f"Welcome {context.contributor.username}! We noticed your interest in {interests}. "
            f"Here are some great first issues in {context.repository.owner}/{context.repository.name}..."
        ),
        "personalization_score": 0.9,
    }


def generate_setup_checklist(context: WorkflowContext) -> dict[str, Any]:
    return {
        "checklist": [
            "Configure git with your name and email",
            f"Install the {context.repository.language} toolchain",
            "Clone the repository and install dependencies",
            "Set up your IDE with recommended extensions",
        ],
        "estimated_time": "45 minutes",
    }


def suggest_mentor(context: WorkflowContext) -> dict[str, Any]:
    return {
        "recommended_mentor": MENTORS[0],
        "reasoning": f"Matches {context.repository.language} experience and timezone {context.contributor.timezone}",
        "alternatives": MENTORS[1:3],
    }


def schedule_onboarding_call(context: WorkflowContext) -> dict[str, Any]:
    return {
        "participants": [context.contributor.username, MENTORS[0], "team_lead"],
        "meeting_link": "https://meet.example.com/onboarding",
        "agenda_sent": True,
    }


def curate_resources(context: WorkflowContext) -> dict[str, Any]:
    resources = [
        {"type": "documentation", "title": "Contributing Guide", "priority": "high"},
        {"type": "video", "title": "Project Overview", "priority": "medium"},
        {"type": "tutorial", "title": "First Contribution Walkthrough", "priority": "high"},
    ]
    if context.repository.contributing_guidelines:
        resources[0]["url"] = context.repository.contributing_guidelines
    return {"resources": resources, "learning_path": "2-week onboarding plan"}


def verify_environment(context: WorkflowContext) -> dict[str, Any]:
    return {
        "git_configured": True,
        "dependencies_installed": True,
        "tests_passing": True,
        "ide_ready": True,
        "overall_status": "ready",
    }


WELCOME_ACTIONS = {
    "analyze_github_profile": analyze_github_profile,
    "generate_welcome_message": generate_welcome_message,
    "generate_setup_checklist": generate_setup_checklist,
    "suggest_mentor": suggest_mentor,
    "schedule_onboarding_call": schedule_onboarding_call,
    "curate_resources": curate_resources,
    "verify_environment": verify_environment,
}
