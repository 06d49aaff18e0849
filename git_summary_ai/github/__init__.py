"""GitHub API Package"""

from git_summary_ai.github.client import (
    GitHubClient,
    GitHubError,
    Comparison,
    CompareCommit,
    CompareFile,
    PullRequest,
)

__all__ = [
    "GitHubClient",
    "GitHubError",
    "Comparison",
    "CompareCommit",
    "CompareFile",
    "PullRequest",
]
