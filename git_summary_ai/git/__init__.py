"""Git Operations Package"""

from git_summary_ai.git.service import (
    GitService,
    GitError,
    BranchInfo,
    DiffStats,
    DiffSummary,
    FileChange,
    parse_numstat,
    parse_github_remote,
)

__all__ = [
    "GitService",
    "GitError",
    "BranchInfo",
    "DiffStats",
    "DiffSummary",
    "FileChange",
    "parse_numstat",
    "parse_github_remote",
]
