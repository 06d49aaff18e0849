"""GitHub REST client for branch comparison and pull requests."""

import http.client
import json
import logging
import socket
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubError(Exception):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


@dataclass
class CompareCommit:
    sha: str
    message: str
    author: str
    date: str


@dataclass
class CompareFile:
    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    patch: str | None = None


@dataclass
class Comparison:
    ahead_by: int
    behind_by: int
    commits: list[CompareCommit] = field(default_factory=list)
    files: list[CompareFile] = field(default_factory=list)

    def to_diff(self) -> str:
        """Reassemble a unified diff from the per-file patches."""
        chunks = []
        for f in self.files:
            chunks.append(f"diff --git a/{f.filename} b/{f.filename}\n--- a/{f.filename}\n+++ b/{f.filename}\n")
            if f.patch:
                chunks.append(f.patch + "\n")
        return "".join(chunks)


@dataclass
class PullRequest:
    number: int
    html_url: str


class GitHubClient:
    def __init__(self, token: str, api_url: str = GITHUB_API_URL, timeout: float = 30):
        if not token:
            raise GitHubError("No GitHub token configured. Set GITHUB_TOKEN or run 'git-summary-ai setup'.")
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        req = urllib.request.Request(
            f"{self.api_url}{path}",
            data=data,
            method=method,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self.token}",
                "X-GitHub-Api-Version": API_VERSION,
                "Content-Type": "application/json",
            },
        )
        logger.debug(f"GitHub {method} {path}")

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode('utf-8')
        except urllib.error.HTTPError as e:
            raise GitHubError(_error_message(e), status=e.code)
        except urllib.error.URLError as e:
            raise GitHubError(f"Cannot reach GitHub: {e.reason}")
        except (socket.timeout, TimeoutError):
            raise GitHubError(f"GitHub request timed out after {self.timeout}s")
        except http.client.HTTPException as e:
            raise GitHubError(f"Incomplete response from GitHub: {e}")

        try:
            return json.loads(body) if body else {}
        except json.JSONDecodeError:
            raise GitHubError("Invalid response from GitHub")

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{urllib.parse.quote(owner, safe='')}/{urllib.parse.quote(repo, safe='')}"

    def verify_repo_access(self, owner: str, repo: str) -> bool:
        try:
            self._request("GET", self._repo_path(owner, repo))
            return True
        except GitHubError as e:
            logger.debug(f"Repository check failed for {owner}/{repo}: {e}")
            return False

    def default_branch(self, owner: str, repo: str) -> str:
        return self._request("GET", self._repo_path(owner, repo)).get("default_branch", "main")

    def compare_branches(self, owner: str, repo: str, base: str, head: str) -> Comparison:
        basehead = urllib.parse.quote(f"{base}...{head}", safe='.')
        data = self._request("GET", f"{self._repo_path(owner, repo)}/compare/{basehead}")

        commits = []
        for item in data.get("commits") or []:
            author = (item.get("commit") or {}).get("author") or {}
            commits.append(CompareCommit(
                sha=item.get("sha", ""),
                message=(item.get("commit") or {}).get("message", ""),
                author=author.get("name") or "Unknown",
                date=author.get("date") or "",
            ))

        files = [
            CompareFile(
                filename=item.get("filename", ""),
                status=item.get("status", ""),
                additions=item.get("additions", 0),
                deletions=item.get("deletions", 0),
                patch=item.get("patch"),
            )
            for item in data.get("files") or []
        ]

        return Comparison(
            ahead_by=data.get("ahead_by", 0),
            behind_by=data.get("behind_by", 0),
            commits=commits,
            files=files,
        )

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = False,
    ) -> PullRequest:
        try:
            data = self._request("POST", f"{self._repo_path(owner, repo)}/pulls", {
                "title": title,
                "body": body,
                "head": head,
                "base": base,
                "draft": draft,
            })
        except GitHubError as e:
            if e.status == 404:
                raise GitHubError(
                    f"Repository not found or insufficient permissions.\n"
                    f"Make sure:\n"
                    f"  1. Repository {owner}/{repo} exists\n"
                    f"  2. Your GitHub token has 'repo' scope\n"
                    f"  3. You have write access to the repository",
                    status=404,
                )
            if e.status == 422:
                raise GitHubError(f"Cannot create PR: {e}", status=422)
            raise

        return PullRequest(number=data["number"], html_url=data["html_url"])


def _error_message(error: urllib.error.HTTPError) -> str:
    """Prefer GitHub's own error text over the bare status line."""
    try:
        data = json.loads(error.read().decode('utf-8'))
    except (ValueError, OSError):
        return f"GitHub API error ({error.code}): {error.reason}"
    details = data.get("errors") if isinstance(data, dict) else None
    if details and isinstance(details[0], dict) and details[0].get("message"):
        return details[0]["message"]
    if isinstance(data, dict) and data.get("message"):
        return f"{data['message']} ({error.code})"
    return f"GitHub API error ({error.code}): {error.reason}"
