"""Smart Triage & Mentorship workflow.

Trigger: new issues/PRs, contributor inactivity, or mentorship requests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..schema import Workflow

if TYPE_CHECKING:
    from ...simulator.state import WorkflowContext


TRIAGE_WORKFLOW = Workflow.model_validate(
    {
        "id": "smart-triage",
        "name": "Smart Triage & Mentorship",
        "description": "Intelligent issue triage system with ongoing mentorship and contributor support",
        "agent_type": "triage",
        "estimated_duration": 45,
        "trigger_description": "Triggered by new issues/PRs, contributor inactivity, or mentorship requests",
        "steps": [
            {
                "id": "triage-1",
                "name": "Monitor Repository Activity",
                "description": "Continuously monitor repository for new issues, PRs, and contributor activity patterns",
                "type": "automated",
                "config": {
                    "simulation_action": "monitor_repository_activity",
                    "monitoring_scope": ["issues", "pull_requests", "discussions", "contributor_activity"],
                    "filters": ["first_time_contributors", "help_wanted", "good_first_issue", "stalled_prs"],
                    "alert_thresholds": {"new_issues": 5, "stalled_prs": 3, "new_contributors": 2},
                },
                "estimated_duration": 3,
                "simulated_action": "Scan repository for new issues and PRs, identify first-time contributors, detect stalled contributions, monitor discussion threads, track contributor activity patterns and engagement levels",
            },
            {
                "id": "triage-2",
                "name": "Intelligent Issue Analysis",
                "description": "Analyze and categorize issues using NLP and historical data",
                "type": "automated",
                "config": {
                    "simulation_action": "analyze_issue_complexity",
                    "analysis_factors": ["description_length", "code_blocks", "error_logs", "reproduction_steps", "attachments"],
                    "categories": ["bug_report", "feature_request", "documentation", "question", "enhancement"],
                    "complexity_levels": ["simple", "moderate", "complex", "expert_required"],
                    "sentiment_analysis": True,
                },
                "estimated_duration": 4,
                "simulated_action": "Apply NLP to understand issue content and intent, analyze complexity based on technical depth and scope, extract key entities and requirements, assess contributor sentiment and urgency, categorize and prioritize automatically",
            },
            {
                "id": "triage-3",
                "name": "Label & Priority Assignment",
                "description": "Review and approve AI-suggested labels and priority assignments",
                "type": "human_approval",
                "config": {
                    "approval_message": "Please review AI-suggested labels and priority for this issue",
                    "approval_options": [
                        {"id": "approve", "label": "Apply Suggestions", "description": "Use all AI-suggested labels and priority", "action": "approve"},
                        {"id": "modify", "label": "Modify Labels", "description": "Adjust labels and priority before applying", "action": "modify"},
                        {"id": "manual", "label": "Manual Assignment", "description": "Skip suggestions and assign manually", "action": "reject"},
                    ],
                    "simulation_action": "suggest_labels_and_priority",
                    "label_categories": ["type", "priority", "complexity", "component", "status"],
                    "priority_factors": ["impact", "urgency", "contributor_level", "dependencies"],
                },
                "estimated_duration": 6,
                "simulated_action": "Generate appropriate labels based on issue analysis, calculate priority using weighted factors, suggest component ownership, recommend status labels, provide reasoning for each suggestion",
                "human_decision": "Choose whether to apply AI suggestions, modify them, or handle labeling manually",
            },
            {
                "id": "triage-4",
                "name": "Contributor Matching Algorithm",
                "description": "Intelligently match issues with suitable contributors and mentors",
                "type": "automated",
                "config": {
                    "simulation_action": "match_contributors",
                    "matching_criteria": ["skill_match", "past_contributions", "availability", "interests", "timezone", "workload"],
                    "contributor_types": ["experts", "regulars", "first_timers", "mentors"],
                    "max_suggestions": 5,
                    "diversity_factor": True,
                },
                "estimated_duration": 5,
                "simulated_action": "Analyze contributor skills and past contributions, assess current workload and availability, calculate skill compatibility scores, consider timezone and communication preferences, prioritize diverse contributor representation, rank and suggest best matches",
            },
            {
                "id": "triage-5",
                "name": "Personalized Outreach Strategy",
                "description": "Design and execute personalized outreach to matched contributors",
                "type": "human_approval",
                "config": {
                    "approval_message": "Review personalized outreach strategy for this issue",
                    "approval_options": [
                        {"id": "approve", "label": "Send Outreach", "description": "Execute the suggested outreach strategy", "action": "approve"},
                        {"id": "modify", "label": "Modify Strategy", "description": "Adjust outreach approach before sending", "action": "modify"},
                        {"id": "skip", "label": "Skip Outreach", "description": "Do not send outreach for this issue", "action": "skip"},
                    ],
                    "simulation_action": "design_outreach_strategy",
                    "outreach_channels": ["github_comment", "slack_dm", "email", "discord"],
                    "personalization_factors": ["contributor_history", "communication_style", "preferred_language", "time_zone"],
                },
                "estimated_duration": 8,
                "simulated_action": "Analyze contributor communication preferences and history, craft personalized message highlighting relevant skills, suggest optimal timing and channel, create follow-up schedule, provide template for mentor introduction",
                "human_decision": "Choose whether to send the personalized outreach, modify the approach, or skip outreach entirely",
            },
            {
                "id": "triage-6",
                "name": "Progress Monitoring & Analytics",
                "description": "Track contributor progress and identify intervention opportunities",
                "type": "data_collection",
                "config": {
                    "simulation_action": "monitor_contributor_progress",
                    "metrics": ["commit_frequency", "pr_merge_rate", "issue_resolution_time", "code_quality", "collaboration_score"],
                    "intervention_triggers": ["stalled_progress", "declining_activity", "repeated_failures", "communication_gaps"],
                    "monitoring_interval": 24,  # hours
                    "analytics_depth": "detailed",
                },
                "estimated_duration": 10,
                "simulated_action": "Track real-time contributor activity and progress, analyze code quality and collaboration patterns, identify early warning signs of struggle, calculate engagement and success metrics, generate intervention recommendations and timeline",
            },
            {
                "id": "triage-7",
                "name": "Adaptive Mentorship Deployment",
                "description": "Deploy appropriate mentorship resources and human intervention",
                "type": "human_approval",
                "config": {
                    "approval_message": "Review recommended mentorship intervention strategy",
                    "approval_options": [
                        {"id": "auto_mentorship", "label": "Deploy AI Mentorship", "description": "Let AI handle mentorship with automated resources", "action": "approve"},
                        {"id": "human_mentor", "label": "Assign Human Mentor", "description": "Assign experienced human mentor for personalized guidance", "action": "modify"},
                        {"id": "hybrid", "label": "Hybrid Approach", "description": "Combine AI resources with human mentor oversight", "action": "modify"},
                        {"id": "resources_only", "label": "Send Resources Only", "description": "Provide learning materials without active mentorship", "action": "skip"},
                    ],
                    "simulation_action": "deploy_mentorship_strategy",
                    "mentorship_types": ["technical_guidance", "process_mentoring", "code_review", "career_development"],
                    "intervention_levels": ["light_touch", "moderate_support", "intensive_mentoring"],
                },
                "estimated_duration": 9,
                "simulated_action": "Analyze contributor needs and progress patterns, recommend optimal mentorship approach, match with appropriate human mentors if needed, generate personalized learning resources, create intervention timeline and success metrics",
                "human_decision": "Choose the best mentorship approach based on contributor needs and available resources",
            },
        ],
    }
)


def monitor_repository_activity(context: WorkflowContext) -> dict[str, Any]:
    issues = context.metadata.get("issues") or []
    pull_requests = context.metadata.get("pull_requests") or []
    return {
        "repository": f"{context.repository.owner}/{context.repository.name}",
        "new_issues": sum(1 for issue in issues if issue.get("state") == "open"),
        "new_prs": sum(1 for pr in pull_requests if pr.get("state") == "open"),
        "first_time_contributors": 1,
        "stalled_contributions": 2,
        "activity_score": 7.2,
    }


def analyze_issue_complexity(context: WorkflowContext) -> dict[str, Any]:
    return {
        "category": "bug_report",
        "complexity": "moderate",
        "sentiment": "neutral",
        "urgency": "medium",
        "estimated_effort": "4-6 hours",
        "required_skills": [context.repository.language.lower(), "testing"],
        "confidence": 0.91,
    }


def suggest_labels_and_priority(context: WorkflowContext) -> dict[str, Any]:
    return {
        "suggested_labels": ["bug", "medium-priority", "frontend", "good-first-issue"],
        "priority": "medium",
        "assignee_suggestion": context.contributor.username,
        "reasoning": "Frontend bug with clear reproduction steps, suitable for intermediate contributor",
        "confidence_score": 0.87,
    }


def match_contributors(context: WorkflowContext) -> dict[str, Any]:
    return {
        "top_matches": [
            {"contributor": context.contributor.username, "match_score": 0.92, "reason": "Skill and interest overlap"},
            {"contributor": "regular_contributor", "match_score": 0.85, "reason": "Past bug fixes in similar area"},
            {"contributor": "first_timer", "match_score": 0.78, "reason": "Looking for first contribution"},
        ],
        "diversity_bonus": 0.15,
        "timezone_compatibility": 0.88,
    }


def design_outreach_strategy(context: WorkflowContext) -> dict[str, Any]:
    return {
        "recommended_channel": "github_comment",
        "personalization_level": "high",
        "message_tone": "encouraging",
        "recipient": context.contributor.username,
        "follow_up_schedule": [3, 7, 14],  # days
        "success_probability": 0.73,
    }


def monitor_contributor_progress(context: WorkflowContext) -> dict[str, Any]:
    return {
        "current_activity": "active",
        "progress_trend": "positive",
        "intervention_needed": False,
        "engagement_score": 8.1,
        "collaboration_quality": "high",
    }


def deploy_mentorship_strategy(context: WorkflowContext) -> dict[str, Any]:
    level = "intensive_mentoring" if context.contributor.experience == "beginner" else "moderate_support"
    return {
        "recommended_approach": "hybrid",
        "mentorship_level": level,
        "human_mentor_assigned": "senior_dev_456",
        "ai_resources": ["code_examples", "best_practices_guide", "video_tutorials"],
        "intervention_timeline": "2 weeks",
        "success_metrics": ["code_quality_improvement", "independent_problem_solving"],
    }


TRIAGE_ACTIONS = {
    "monitor_repository_activity": monitor_repository_activity,
    "analyze_issue_complexity": analyze_issue_complexity,
    "suggest_labels_and_priority": suggest_labels_and_priority,
    "match_contributors": match_contributors,
    "design_outreach_strategy": design_outreach_strategy,
    "monitor_contributor_progress": monitor_contributor_progress,
    "deploy_mentorship_strategy": deploy_mentorship_strategy,
}
