"""Branch workflow commands: analyze, summarize, run, push and pr."""

import logging

from git_summary_ai import APP_NAME
from git_summary_ai.git import DiffSummary, GitError
from git_summary_ai.github import GitHubClient, GitHubError
from git_summary_ai.llm import SummaryRequest, SummaryResponse, get_client
from git_summary_ai.output import (
    bold, colorize_commit_type, detail, dim, error, info, print_box, print_info, print_success,
    print_warning, step, success, Spinner,
)
from git_summary_ai.providers import Provider

from git_summary_ai.cli.context import AppContext
from git_summary_ai.cli.utils import choose, confirm, edit_message, is_interactive

logger = logging.getLogger(__name__)

MAX_FILES_SHOWN = 15


def _display_stats(summary: DiffSummary) -> None:
    stats = summary.stats
    detail("Branch", bold(summary.branch.current))
    if summary.branch.tracking:
        detail("Tracking", summary.branch.tracking)
    print(f"      Files changed: {bold(str(stats.files_changed))} | "
          f"Lines: {success(f'+{stats.insertions}')} / {error(f'-{stats.deletions}')}")


def _display_files(summary: DiffSummary) -> None:
    files = summary.stats.files
    shown = files[:MAX_FILES_SHOWN]
    for f in shown:
        print(dim(f"        {f.path} (+{f.additions} -{f.deletions})"))
    if len(files) > len(shown):
        print(dim(f"        ... and {len(files) - len(shown)} more files"))


def _collect_diff(ctx: AppContext, target: str | None) -> DiffSummary:
    ctx.git.require_repository()
    base = target or ctx.config.target_branch
    with Spinner(f"Comparing against {base}"):
        return ctx.git.diff(base)


def _instructions(ctx: AppContext, extra: str | None) -> str | None:
    parts = []
    if ctx.config.language and ctx.config.language != "en":
        parts.append(f"Write the title and summary in this language: {ctx.config.language}.")
    if extra:
        parts.append(extra)
    return "\n".join(parts) or None


def _generate(ctx: AppContext, summary: DiffSummary, provider: Provider, model: str,
              instructions: str | None, operation: str = "summarize") -> SummaryResponse:
    """Ask the model for a summary and log the tokens it cost."""
    api_key = ctx.credentials.require_api_key(provider)
    client = get_client(
        provider,
        api_key=api_key,
        model=model,
        max_tokens=ctx.config.max_tokens,
        prompt_template=ctx.config.prompt_template,
    )
    request = SummaryRequest(
        diff=summary.diff,
        branch=summary.branch.current,
        files_changed=summary.stats.file_names,
        insertions=summary.stats.insertions,
        deletions=summary.stats.deletions,
        custom_instructions=_instructions(ctx, instructions),
    )

    with Spinner(f"Generating summary using {info(client.name)}"):
        response = client.generate_summary(request)
    print_success(f"Summary generated by {client.name}")

    if response.usage:
        ctx.tracker.record_usage(
            provider, model, response.usage.input_tokens, response.usage.output_tokens, operation,
        )
        logger.debug(f"Tokens: {response.usage.input_tokens} in / {response.usage.output_tokens} out")

    prefix = ctx.config.commit_prefix
    if prefix and not response.commit_message.startswith(prefix):
        response.commit_message = f"{prefix} {response.commit_message}"
    return response


def _preview(response: SummaryResponse) -> None:
    print()
    print_box(response.summary, title="Summary")
    print()
    print_info("Commit message:")
    print(colorize_commit_type(response.commit_message))
    print()


def _review(ctx: AppContext, args, summary: DiffSummary, provider: Provider, model: str,
            accept_label: str) -> str | None:
    """Generate, preview and let the user accept, edit or regenerate.

    Returns the final commit message, or None if cancelled.
    """
    response = _generate(ctx, summary, provider, model, args.instructions)
    while True:
        _preview(response)
        if args.yes or not is_interactive():
            return response.commit_message

        action = choose("Accept this summary?", [
            ('accept', accept_label),
            ('edit', "Edit commit message"),
            ('regenerate', "Regenerate"),
            ('cancel', "Cancel"),
        ])
        if action in (None, 'cancel'):
            print(dim("Cancelled."))
            return None
        if action == 'accept':
            return response.commit_message
        if action == 'edit':
            edited = edit_message(response.commit_message)
            if edited:
                return edited
            print_warning("Editor returned nothing, keeping the generated message")
            return response.commit_message
        response = _generate(ctx, summary, provider, model, args.instructions, operation="regenerate")


def _commit(ctx: AppContext, message: str) -> str:
    if ctx.git.has_uncommitted_changes():
        ctx.git.stage_all()
    sha = ctx.git.commit(message)
    detail("Commit", sha[:7])
    return sha


def _push(ctx: AppContext) -> None:
    branch = ctx.git.branch_info()
    with Spinner(f"Pushing to origin/{branch.current}"):
        ctx.git.push(set_upstream=not branch.tracking)
    print_success(f"Pushed to origin/{branch.current}")


# ---------------------------------------------------------------------------
# commands
# ---------------------------------------------------------------------------

def run_analyze(ctx: AppContext, args) -> int:
    summary = _collect_diff(ctx, args.target)
    print(f"\n{bold('Branch analysis')} {dim(f'(against {args.target or ctx.config.target_branch})')}\n")
    _display_stats(summary)
    if summary.is_empty:
        print()
        print_warning("No changes detected")
        return 0
    _display_files(summary)
    if args.show_diff:
        print()
        print(summary.diff)
    print()
    return 0


def run_summarize(ctx: AppContext, args) -> int:
    summary = _collect_diff(ctx, args.target)
    if summary.is_empty:
        print_warning("No changes to summarize")
        return 0

    provider = ctx.resolve_provider(args.provider)
    model = ctx.resolve_model(provider, args.model)
    label = "Yes, commit with this message" if args.commit else "Yes, use this summary"
    message = _review(ctx, args, summary, provider, model, label)
    if message is None:
        return 0

    if args.commit:
        _commit(ctx, message)
        print_success("Committed")
    else:
        print_success("Summary generated and accepted")
        print(f"\n{dim('Next:')} {APP_NAME} summarize --commit, or {APP_NAME} run --push\n")
    return 0


def run_full(ctx: AppContext, args) -> int:
    """analyze -> summarize -> commit, then optionally push and open a PR."""
    push = args.push or bool(args.pr)
    total = 4 if push else 3
    provider = ctx.resolve_provider(args.provider)
    model = ctx.resolve_model(provider, args.model)
    # fail before any git work when the key is missing
    ctx.credentials.require_api_key(provider)

    step(1, total, "Analyzing branch...")
    summary = _collect_diff(ctx, args.target)
    _display_stats(summary)
    if summary.is_empty:
        print()
        print_warning("No changes detected. Nothing to commit.")
        return 0
    print()

    step(2, total, "Generating AI summary...")
    message = _review(ctx, args, summary, provider, model,
                      "Yes, commit and push" if push else "Yes, commit")
    if message is None:
        return 0

    step(3, total, "Committing...")
    _commit(ctx, message)

    if push:
        step(4, total, "Pushing...")
        _push(ctx)

    print()
    print_success("Done! Ready for review.")

    if args.pr:
        client, owner, repo = _github_target(ctx)
        title, _, body = message.partition('\n')
        return _create_pr(client, owner, repo, head=ctx.git.branch_info().current, base=args.pr,
                          title=title, body=body.strip())

    repo = ctx.git.github_repo()
    if push and repo:
        print_info(f"Create PR: https://github.com/{repo[0]}/{repo[1]}/compare/{ctx.git.branch_info().current}")
    return 0


def run_push(ctx: AppContext, args) -> int:
    ctx.git.require_repository()
    if ctx.git.has_uncommitted_changes():
        print_warning("You have uncommitted changes; only existing commits will be pushed")
    _push(ctx)
    return 0


def _github_target(ctx: AppContext) -> tuple[GitHubClient, str, str]:
    owner_repo = ctx.git.github_repo()
    if not owner_repo:
        raise GitError("The origin remote does not point at GitHub")
    client = GitHubClient(ctx.credentials.require_api_key(Provider.GITHUB))
    return client, owner_repo[0], owner_repo[1]


def _create_pr(client: GitHubClient, owner: str, repo: str, head: str, base: str, title: str, body: str) -> int:
    with Spinner("Opening pull request"):
        pr = client.create_pull_request(owner, repo, title=title, body=body, head=head, base=base)
    print_success(f"Opened pull request #{pr.number}")
    print(f"  {info(pr.html_url)}")
    return 0


def run_pr(ctx: AppContext, args) -> int:
    """Summarize the branch as GitHub sees it and open a pull request."""
    ctx.git.require_repository()
    branch = ctx.git.branch_info()
    if branch.is_detached:
        raise GitError("Cannot open a pull request from a detached HEAD")
    base = args.base or ctx.config.target_branch

    client, owner, repo = _github_target(ctx)
    if not client.verify_repo_access(owner, repo):
        raise GitHubError(f"Cannot access {owner}/{repo}. Check that your GitHub token has 'repo' scope.")

    if not branch.tracking:
        if not args.yes and is_interactive() and not confirm(f"Branch {branch.current} is not on GitHub yet. Push it now?"):
            print(dim("Cancelled."))
            return 0
        _push(ctx)

    with Spinner(f"Comparing {base}...{branch.current} on GitHub"):
        comparison = client.compare_branches(owner, repo, base, branch.current)
    if comparison.ahead_by == 0:
        print_warning(f"{branch.current} has no commits ahead of {base}")
        return 1
    detail("Commits", str(comparison.ahead_by))
    detail("Files", str(len(comparison.files)))

    local = ctx.git.diff(base)
    summary = DiffSummary(branch=branch, stats=local.stats, diff=comparison.to_diff() or local.diff)

    provider = ctx.resolve_provider(args.provider)
    model = ctx.resolve_model(provider, args.model)
    response = _generate(ctx, summary, provider, model, None)
    title = args.title or response.title or response.commit_message.split('\n', 1)[0]

    print()
    print_info(f"Title: {bold(title)}")
    print_box(response.summary, title="Description")
    print()
    if not args.yes and is_interactive() and not confirm(f"Open pull request {branch.current} -> {base}?"):
        print(dim("Cancelled."))
        return 0

    return _create_pr(client, owner, repo, head=branch.current, base=base, title=title, body=response.summary)
