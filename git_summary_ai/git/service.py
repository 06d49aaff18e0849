"""Git Service - diff, commit and push through the git CLI."""

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# git@github.com:owner/repo.git and https://github.com/owner/repo(.git)
_SSH_REMOTE = re.compile(r'git@github\.com:([^/]+)/(.+?)(?:\.git)?$')
_HTTPS_REMOTE = re.compile(r'https://(?:[^@/]+@)?github\.com/([^/]+)/(.+?)(?:\.git)?/?$')


@dataclass
class FileChange:
    """Represents a single file's changes."""
    path: str
    additions: int
    deletions: int


@dataclass
class BranchInfo:
    current: str
    tracking: str | None = None
    is_detached: bool = False


@dataclass
class DiffStats:
    files: list[FileChange] = field(default_factory=list)

    @property
    def files_changed(self) -> int:
        return len(self.files)

    @property
    def insertions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    @property
    def file_names(self) -> list[str]:
        return [f.path for f in self.files]


@dataclass
class DiffSummary:
    """Everything the summary prompt needs about a branch."""
    branch: BranchInfo
    stats: DiffStats
    diff: str

    @property
    def is_empty(self) -> bool:
        return not self.diff.strip()


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitService:
    """Thin wrapper over the git executable for one working directory."""

    def __init__(self, cwd: Path | None = None, exclude_patterns: list[str] | None = None):
        self.cwd = cwd
        self.exclude_patterns = list(exclude_patterns or [])

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        logger.debug(f"git {' '.join(args)}")
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr.strip()}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def is_repository(self) -> bool:
        try:
            self._run_git('rev-parse', '--git-dir')
            return True
        except GitError:
            return False

    def require_repository(self) -> None:
        """Fail fast if we're not in a git repository."""
        if not self.is_repository():
            raise GitError("Not inside a git repository")

    def branch_info(self) -> BranchInfo:
        current = self._run_git('rev-parse', '--abbrev-ref', 'HEAD').strip()
        if current == 'HEAD':
            return BranchInfo(current='HEAD', is_detached=True)
        try:
            tracking = self._run_git('rev-parse', '--abbrev-ref', '--symbolic-full-name', '@{u}').strip()
        except GitError:
            tracking = None
        return BranchInfo(current=current, tracking=tracking or None)

    def _pathspec(self) -> list[str]:
        if not self.exclude_patterns:
            return []
        return ['--', '.', *(f':(exclude){p}' for p in self.exclude_patterns)]

    def _diff_range(self, base: str) -> list[str]:
        """Revisions to diff for the branch against base.

        Merge-base to HEAD when they differ; when the branch has no commits of
        its own, the uncommitted work against HEAD. Falls back to a direct
        diff against base, then to the working tree.
        """
        try:
            merge_base = self._run_git('merge-base', base, 'HEAD').strip()
            head = self._run_git('rev-parse', 'HEAD').strip()
            if merge_base == head:
                return ['HEAD']
            return [merge_base, 'HEAD']
        except GitError as e:
            logger.debug(f"merge-base with {base} failed: {e}")

        try:
            self._run_git('rev-parse', '--verify', base)
            return [base, 'HEAD']
        except GitError:
            return ['HEAD']

    def diff(self, base: str = 'main') -> DiffSummary:
        revisions = self._diff_range(base)
        text = self._run_git('diff', *revisions, *self._pathspec())
        stats = DiffStats(files=parse_numstat(
            self._run_git('diff', '--numstat', *revisions, *self._pathspec())
        ))
        return DiffSummary(branch=self.branch_info(), stats=stats, diff=text)

    def has_uncommitted_changes(self) -> bool:
        return bool(self._run_git('status', '--porcelain').strip())

    def stage_all(self) -> None:
        self._run_git('add', '-A')

    def commit(self, message: str) -> str:
        """Commit staged changes and return the new commit's hash."""
        self._run_git('commit', '-m', message)
        return self._run_git('rev-parse', 'HEAD').strip()

    def push(self, set_upstream: bool = False) -> None:
        branch = self.branch_info()
        if branch.is_detached:
            raise GitError("Cannot push from a detached HEAD")
        if set_upstream or not branch.tracking:
            self._run_git('push', '-u', 'origin', branch.current)
        else:
            self._run_git('push')

    def remote_url(self, remote: str = 'origin') -> str | None:
        try:
            return self._run_git('remote', 'get-url', remote).strip() or None
        except GitError:
            return None

    def github_repo(self) -> tuple[str, str] | None:
        """(owner, repo) parsed from the origin remote, if it points at GitHub."""
        url = self.remote_url()
        if not url:
            return None
        return parse_github_remote(url)


def parse_numstat(output: str) -> list[FileChange]:
    """Parse 'git diff --numstat' output. Binary files report '-' counts."""
    files = []
    for line in output.strip().split('\n'):
        parts = line.split('\t')
        if len(parts) >= 3:
            additions = int(parts[0]) if parts[0] != '-' else 0
            deletions = int(parts[1]) if parts[1] != '-' else 0
            files.append(FileChange(path=parts[2], additions=additions, deletions=deletions))
    return files


def parse_github_remote(url: str) -> tuple[str, str] | None:
    for pattern in (_SSH_REMOTE, _HTTPS_REMOTE):
        match = pattern.match(url.strip())
        if match:
            return match.group(1), match.group(2)
    return None
