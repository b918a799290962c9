"""Randomized sample contributors, repositories, issues and pull requests.

Used to seed an execution's context when the caller supplies no real data.
Every function accepts an optional ``random.Random`` so tests can pin content.
"""

from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta

from .state import ContributorInfo, Issue, PullRequest, RepositoryInfo

FIRST_NAMES = ["Alex", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Quinn", "Avery"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis"]
EXPERIENCE_LEVELS = ["beginner", "intermediate", "advanced"]
INTERESTS = ["frontend", "backend", "documentation", "testing", "devops", "ui/ux", "mobile", "ai"]

REPOSITORY_OWNER = "agntcy"
REPOSITORIES = [
    {"name": "dir", "description": "Agent Directory Project", "language": "TypeScript"},
    {"name": "awesome-agents", "description": "Curated list of AI agents", "language": "JavaScript"},
    {"name": "agent-orchestrator", "description": "Multi-agent coordination system", "language": "Python"},
]

ISSUE_TITLES = [
    "Add welcome message for new contributors",
    "Fix typo in documentation",
    "Improve error handling in API",
    "Add unit tests for authentication",
    "Update dependencies to latest versions",
    "Implement dark mode toggle",
    "Add accessibility improvements",
    "Optimize database queries",
    "Add Docker support",
    "Fix responsive design issues",
]
ISSUE_LABELS = ["good first issue", "help wanted", "documentation", "bug", "enhancement"]

PR_TITLES = [
    "feat: Add contributor onboarding workflow",
    "fix: Resolve authentication issues",
    "docs: Update README with installation guide",
    "refactor: Improve code organization",
    "test: Add comprehensive test coverage",
]


def generate_contributor(rng: random.Random | None = None) -> ContributorInfo:
    rng = rng or random.Random()
    first_name = rng.choice(FIRST_NAMES)
    last_name = rng.choice(LAST_NAMES)
    username = f"{first_name.lower()}{last_name.lower()}{rng.randrange(1000)}"
    sign = "+" if rng.random() > 0.5 else "-"

    return ContributorInfo(
        id=f"contributor-{uuid.uuid4().hex[:12]}",
        username=username,
        email=f"{username}@example.com",
        # Joined in the last 30 days
        join_date=datetime.now() - timedelta(days=rng.random() * 30),
        experience=rng.choice(EXPERIENCE_LEVELS),
        interests=INTERESTS[: rng.randint(1, 3)],
        timezone=f"UTC{sign}{rng.randint(1, 12)}",
    )


def generate_repository(rng: random.Random | None = None) -> RepositoryInfo:
    rng = rng or random.Random()
    repo = rng.choice(REPOSITORIES)
    base_url = f"https://github.com/{REPOSITORY_OWNER}/{repo['name']}/blob/main"

    return RepositoryInfo(
        name=repo["name"],
        owner=REPOSITORY_OWNER,
        description=repo["description"],
        language=repo["language"],
        contributing_guidelines=f"{base_url}/CONTRIBUTING.md",
        code_of_conduct=f"{base_url}/CODE_OF_CONDUCT.md",
    )


def generate_issues(count: int = 5, rng: random.Random | None = None) -> list[Issue]:
    rng = rng or random.Random()
    now = datetime.now()
    issues = []
    for number in range(1, count + 1):
        issues.append(
            Issue(
                id=f"issue-{number}",
                number=number,
                title=rng.choice(ISSUE_TITLES),
                state="open" if rng.random() > 0.3 else "closed",
                labels=ISSUE_LABELS[: rng.randint(1, 3)],
                assignee=f"user{rng.randrange(100)}" if rng.random() > 0.7 else None,
                created_at=now - timedelta(days=rng.random() * 7),
                updated_at=now,
            )
        )
    return issues


def generate_pull_requests(count: int = 3, rng: random.Random | None = None) -> list[PullRequest]:
    rng = rng or random.Random()
    now = datetime.now()
    pull_requests = []
    for number in range(1, count + 1):
        pull_requests.append(
            PullRequest(
                id=f"pr-{number}",
                number=number,
                title=rng.choice(PR_TITLES),
                state="open" if rng.random() > 0.4 else "merged",
                author=f"contributor{rng.randrange(100)}",
                reviewers=[f"reviewer{rng.randint(1, 5)}"],
                created_at=now - timedelta(days=rng.random() * 5),
                updated_at=now,
            )
        )
    return pull_requests
