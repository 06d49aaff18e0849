"""CLI Main Entry Point"""

import logging
import sys

from git_summary_ai import APP_NAME
from git_summary_ai.credentials import CredentialError, MissingCredentialError
from git_summary_ai.git import GitError
from git_summary_ai.github import GitHubError
from git_summary_ai.llm import LLMError
from git_summary_ai.output import dim, print_error

from git_summary_ai.cli.args import build_parser, parse_args
from git_summary_ai.cli.commands import run_config, run_setup, show_tokens
from git_summary_ai.cli.context import AppContext
from git_summary_ai.cli.utils import confirm, is_interactive, setup_logging
from git_summary_ai.cli.workflow import run_analyze, run_full, run_pr, run_push, run_summarize

logger = logging.getLogger(__name__)


def _dispatch(ctx: AppContext, args) -> int:
    command = args.command
    if command == 'setup':
        return run_setup(ctx)
    if command == 'analyze':
        return run_analyze(ctx, args)
    if command == 'summarize':
        return run_summarize(ctx, args)
    if command == 'run':
        return run_full(ctx, args)
    if command == 'push':
        return run_push(ctx, args)
    if command == 'pr':
        return run_pr(ctx, args)
    if command == 'config':
        return run_config(ctx, args)
    if command == 'tokens':
        return show_tokens(ctx, args.days, args.clear)
    build_parser().print_help()
    return 0


def _handle_missing_credential(ctx: AppContext, e: MissingCredentialError) -> int:
    """Interactive users may jump straight into setup; scripts get the message and exit 1."""
    print_error(str(e))
    if is_interactive() and confirm(f"Run '{APP_NAME} setup' now?"):
        return run_setup(ctx)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        ctx = AppContext.create()
        return _dispatch(ctx, args)
    except MissingCredentialError as e:
        return _handle_missing_credential(ctx, e)
    except (CredentialError, LLMError, GitError, GitHubError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print(dim("\nInterrupted."))
        return 130


if __name__ == '__main__':
    sys.exit(main())
