import random
import sys
import unittest
from datetime import datetime, timedelta
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from agentsim.simulator.generator import (
    ISSUE_LABELS,
    ISSUE_TITLES,
    PR_TITLES,
    REPOSITORIES,
    generate_contributor,
    generate_issues,
    generate_pull_requests,
    generate_repository,
)


class DataGeneratorTests(unittest.TestCase):
    def test_contributor_fields(self):
        contributor = generate_contributor(random.Random(1))

        self.assertEqual(contributor.email, f"{contributor.username}@example.com")
        self.assertIn(contributor.experience, ["beginner", "intermediate", "advanced"])
        self.assertTrue(1 <= len(contributor.interests) <= 3)
        self.assertRegex(contributor.timezone, r"^UTC[+-]\d{1,2}$")
        self.assertGreater(contributor.join_date, datetime.now() - timedelta(days=31))

    def test_seeded_generation_is_reproducible(self):
        first = generate_contributor(random.Random(42))
        second = generate_contributor(random.Random(42))

        self.assertEqual(first.username, second.username)
        self.assertEqual(first.experience, second.experience)
        self.assertEqual(first.timezone, second.timezone)

    def test_repository_is_one_of_the_known_projects(self):
        repository = generate_repository(random.Random(3))

        self.assertEqual(repository.owner, "agntcy")
        self.assertIn(repository.name, [repo["name"] for repo in REPOSITORIES])
        self.assertTrue(repository.contributing_guidelines.endswith("/CONTRIBUTING.md"))

    def test_issues_are_numbered_from_one(self):
        issues = generate_issues(4, random.Random(5))

        self.assertEqual([issue.number for issue in issues], [1, 2, 3, 4])
        for issue in issues:
            self.assertIn(issue.title, ISSUE_TITLES)
            self.assertIn(issue.state, ["open", "closed"])
            self.assertTrue(set(issue.labels) <= set(ISSUE_LABELS))
            self.assertGreaterEqual(len(issue.labels), 1)
        self.assertEqual(generate_issues(0), [])

    def test_pull_requests(self):
        pull_requests = generate_pull_requests(rng=random.Random(9))

        self.assertEqual(len(pull_requests), 3)
        for pr in pull_requests:
            self.assertIn(pr.title, PR_TITLES)
            self.assertIn(pr.state, ["open", "merged"])
            self.assertEqual(len(pr.reviewers), 1)


if __name__ == "__main__":
    unittest.main()
