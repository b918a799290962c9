"""First Contribution Facilitator workflow.

Trigger: a contributor asks for help, shows interest in contributing, or
claims a first issue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..schema import Workflow

if TYPE_CHECKING:
    from ...simulator.state import WorkflowContext


CONTRIBUTION_WORKFLOW = Workflow.model_validate(
    {
        "id": "first-contribution",
        "name": "First Contribution Facilitator",
        "description": "Comprehensive workflow that guides contributors through their first successful contribution to the project",
        "agent_type": "contribution",
        "estimated_duration": 60,
        "trigger_description": "Triggered when contributor requests help, shows interest in contributing, or claims their first issue",
        "steps": [
            {
                "id": "contrib-1",
                "name": "Analyze Contributor Profile & Skills",
                "description": "Deep analysis of contributor background, skills, and learning preferences to match with appropriate tasks",
                "type": "data_collection",
                "config": {
                    "simulation_action": "analyze_contributor_skills",
                    "analysis_factors": ["github_activity", "language_proficiency", "project_complexity", "learning_style"],
                    "skill_assessment": ["beginner_friendly", "documentation", "bug_fixes", "tests", "features"],
                    "difficulty_matching": True,
                },
                "estimated_duration": 5,
                "simulated_action": "Analyze GitHub contribution history, assess language proficiency from past projects, evaluate complexity of previous work, determine optimal starting difficulty level and task categories",
            },
            {
                "id": "contrib-2",
                "name": "Issue Recommendation Decision",
                "description": "Review and approve recommended first issue based on contributor skill analysis",
                "type": "human_approval",
                "config": {
                    "approval_message": "Please review the recommended first issue for this contributor",
                    "approval_options": [
                        {"id": "approve", "label": "Assign This Issue", "description": "This issue is perfect for the contributor's skill level", "action": "approve"},
                        {"id": "suggest-alternative", "label": "Choose Different Issue", "description": "Select from alternative recommendations", "action": "modify"},
                        {"id": "create-custom", "label": "Create Custom Task", "description": "Design a tailored first task", "action": "modify"},
                    ],
                    "simulation_action": "recommend_first_issue",
                    "recommendation_criteria": ["skill_match", "learning_value", "impact", "mentor_availability"],
                    "issue_categories": ["good_first_issue", "documentation", "bug_fix", "test_improvement"],
                },
                "estimated_duration": 8,
                "simulated_action": "Scan repository for beginner-friendly issues, match issue requirements with contributor skills, prioritize issues with good learning value and mentor availability, present top 3 recommendations with detailed reasoning",
                "human_decision": "Choose whether to assign the recommended issue, select an alternative, or create a custom first task",
            },
            {
                "id": "contrib-3",
                "name": "Reserve and Assign Issue",
                "description": "Formally assign the chosen issue to the contributor and update project tracking",
                "type": "automated",
                "config": {
                    "simulation_action": "assign_issue",
                    "add_labels": ["first-timer-only", "help-wanted", "mentor-assigned"],
                    "notify_maintainers": True,
                    "set_due_date": True,
                    "create_tracking": True,
                },
                "estimated_duration": 3,
                "simulated_action": "Assign issue to contributor in GitHub, add appropriate labels for visibility, notify maintainers about new contributor, set reasonable due date based on issue complexity, create internal tracking for progress monitoring",
            },
            {
                "id": "contrib-4",
                "name": "Development Environment Setup",
                "description": "Guide contributor through complete local development environment configuration",
                "type": "automated",
                "config": {
                    "simulation_action": "setup_dev_environment",
                    "generate_commands": True,
                    "validate_setup": True,
                    "include_tests": True,
                    "os_specific": True,
                    "ide_integration": True,
                },
                "estimated_duration": 12,
                "simulated_action": "Generate OS-specific setup commands, verify git configuration, install project dependencies, configure development environment variables, run test suite to ensure everything works, set up IDE integration and debugging tools",
            },
            {
                "id": "contrib-5",
                "name": "Create Feature Branch Strategy",
                "description": "Help contributor create properly named feature branch and establish workflow",
                "type": "automated",
                "config": {
                    "simulation_action": "create_feature_branch",
                    "branch_naming": "feature/ISSUE-123-brief-description",
                    "include_issue_number": True,
                    "setup_upstream": True,
                    "create_template": True,
                },
                "estimated_duration": 3,
                "simulated_action": "Generate appropriate branch name following project conventions, create feature branch from main/master, set up upstream tracking, create commit message template, establish branch protection rules and workflow guidelines",
            },
            {
                "id": "contrib-6",
                "name": "Implementation Guidance & Checkpoints",
                "description": "Provide step-by-step implementation guidance with interactive checkpoints",
                "type": "data_collection",
                "config": {
                    "simulation_action": "provide_implementation_guidance",
                    "guidance_type": "interactive",
                    "checkpoints": ["understanding_requirements", "code_structure", "testing", "documentation"],
                    "resources": ["code_examples", "templates", "documentation_links", "video_tutorials"],
                    "progress_tracking": True,
                },
                "estimated_duration": 20,
                "simulated_action": "Break down implementation into manageable steps, provide code examples and templates, offer multiple learning resources, create interactive checkpoints for progress validation, adapt guidance based on contributor questions and progress",
            },
            {
                "id": "contrib-7",
                "name": "Code Review & Merge Decision",
                "description": "Submit completed work for code review and determine merge readiness",
                "type": "human_approval",
                "config": {
                    "approval_message": "Review completed contribution and determine if ready for merge",
                    "approval_options": [
                        {"id": "approve", "label": "Approve & Merge", "description": "Code meets standards and is ready to merge", "action": "approve"},
                        {"id": "request-changes", "label": "Request Changes", "description": "Code needs revisions before approval", "action": "modify"},
                        {"id": "more-guidance", "label": "Provide More Guidance", "description": "Contributor needs additional help", "action": "modify"},
                    ],
                    "simulation_action": "submit_for_review",
                    "review_criteria": ["code_quality", "test_coverage", "documentation", "standards_compliance"],
                    "reviewers": ["mentor", "code_reviewer", "maintainer"],
                },
                "estimated_duration": 9,
                "simulated_action": "Analyze code quality and test coverage, verify documentation completeness, check compliance with project standards, generate comprehensive review summary, provide specific feedback and improvement suggestions",
                "human_decision": "Evaluate if the contribution is ready to merge, needs changes, or requires more guidance",
            },
        ],
    }
)


def _open_issues(context: WorkflowContext) -> list[dict[str, Any]]:
    issues = context.metadata.get("issues") or []
    return [issue for issue in issues if issue.get("state") == "open"] or list(issues)


def analyze_contributor_skills(context: WorkflowContext) -> dict[str, Any]:
    return {
        "skill_level": context.contributor.experience,
        "preferred_tasks": ["documentation", "bug_fixes"],
        "learning_style": "visual",
        "estimated_difficulty": "beginner_to_intermediate",
        "confidence": 0.88,
    }


def recommend_first_issue(context: WorkflowContext) -> dict[str, Any]:
    issues = _open_issues(context)
    return {
        "recommended_issue": issues[0] if issues else None,
        "reasoning": "Matches documentation experience and provides good learning opportunity",
        "alternatives": issues[1:3],
        "estimated_time": "4-6 hours",
        "learning_value": "high",
    }


def assign_issue(context: WorkflowContext) -> dict[str, Any]:
    issues = _open_issues(context)
    return {
        "issue_assigned": True,
        "issue_number": issues[0]["number"] if issues else None,
        "assignee": context.contributor.username,
        "labels_added": ["first-timer-only", "help-wanted"],
        "mentor_assigned": "senior_dev_123",
        "tracking_created": True,
    }


def setup_dev_environment(context: WorkflowContext) -> dict[str, Any]:
    repo = context.repository
    return {
        "setup_commands": [f"git clone https://github.com/{repo.owner}/{repo.name}.git", "install dependencies", "run tests"],
        "validation_passed": True,
        "tests_running": True,
        "ide_configured": True,
        "setup_time": "25 minutes",
    }


def create_feature_branch(context: WorkflowContext) -> dict[str, Any]:
    issues = _open_issues(context)
    number = issues[0]["number"] if issues else 123
    return {
        "branch_name": f"feature/ISSUE-{number}-first-contribution",
        "upstream_configured": True,
        "commit_template": f"Describe your change\n\nFixes #{number}",
        "protection_rules": "active",
    }


def provide_implementation_guidance(context: WorkflowContext) -> dict[str, Any]:
    return {
        "current_step": "code_structure",
        "next_steps": ["Implement fix", "Add tests", "Update docs"],
        "resources_provided": ["example_code", "test_template"],
        "progress_percentage": 45,
        "estimated_completion": "2 more hours",
    }


def submit_for_review(context: WorkflowContext) -> dict[str, Any]:
    return {
        "code_quality_score": 8.5,
        "test_coverage": 95,
        "documentation_complete": True,
        "standards_compliant": True,
        "review_summary": "Good first contribution, minor style suggestions",
        "ready_for_merge": True,
    }


CONTRIBUTION_ACTIONS = {
    "analyze_contributor_skills": analyze_contributor_skills,
    "recommend_first_issue": recommend_first_issue,
    "assign_issue": assign_issue,
    "setup_dev_environment": setup_dev_environment,
    "create_feature_branch": create_feature_branch,
    "provide_implementation_guidance": provide_implementation_guidance,
    "submit_for_review": submit_for_review,
}
