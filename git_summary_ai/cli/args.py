"""CLI Argument Parsing"""

import argparse
import argcomplete

from git_summary_ai import APP_NAME, __version__
from git_summary_ai.providers import AI_PROVIDER_NAMES, PROVIDER_NAMES


def _add_generation_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-t', '--target', type=str, metavar='BRANCH', help='Branch to compare against (default: config targetBranch)')
    parser.add_argument('-p', '--provider', type=str, choices=AI_PROVIDER_NAMES, help='AI provider for this run')
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model for this run')
    parser.add_argument('-i', '--instructions', type=str, metavar='TEXT', help='Extra instructions for the summary')
    parser.add_argument('-y', '--yes', action='store_true', help='Skip confirmations')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='AI-powered summaries, commits and pull requests for your branch',
        epilog=f'Example: {APP_NAME} run --push'
    )
    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')

    sub = parser.add_subparsers(dest='command', metavar='COMMAND')

    sub.add_parser('setup', help='Choose a provider and store its API key')

    analyze = sub.add_parser('analyze', help='Show what changed on this branch')
    analyze.add_argument('-t', '--target', type=str, metavar='BRANCH', help='Branch to compare against')
    analyze.add_argument('-v', '--show-diff', action='store_true', help='Also print the diff')

    summarize = sub.add_parser('summarize', help='Generate an AI summary and preview it')
    _add_generation_options(summarize)
    summarize.add_argument('--commit', action='store_true', help='Commit with the accepted message')

    run = sub.add_parser('run', help='Analyze, summarize and commit in one go')
    _add_generation_options(run)
    run.add_argument('--push', action='store_true', help='Push after committing')
    run.add_argument('--pr', type=str, metavar='BASE', help='Open a pull request against BASE (implies --push)')

    sub.add_parser('push', help='Push the current branch, setting upstream if needed')

    pr = sub.add_parser('pr', help='Open a GitHub pull request for the current branch')
    pr.add_argument('-b', '--base', type=str, metavar='BRANCH', help='Base branch (default: config targetBranch)')
    pr.add_argument('--title', type=str, help='Pull request title (default: AI generated)')
    pr.add_argument('-p', '--provider', type=str, choices=AI_PROVIDER_NAMES, help='AI provider for the description')
    pr.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model for the description')
    pr.add_argument('-y', '--yes', action='store_true', help='Skip confirmations')

    config = sub.add_parser('config', help='Show or change settings')
    config_sub = config.add_subparsers(dest='config_command', metavar='ACTION')
    config_sub.add_parser('show', help='Show the merged configuration')
    set_provider = config_sub.add_parser('set-provider', help='Set the default AI provider')
    set_provider.add_argument('provider', choices=AI_PROVIDER_NAMES)
    set_model = config_sub.add_parser('set-model', help='Set the model for a provider')
    set_model.add_argument('provider', choices=AI_PROVIDER_NAMES)
    set_model.add_argument('model')
    list_models = config_sub.add_parser('list-models', help='List models a provider can serve')
    list_models.add_argument('provider', nargs='?', choices=AI_PROVIDER_NAMES)
    refresh = config_sub.add_parser('refresh-models', help='Refresh model lists from the provider APIs')
    refresh.add_argument('-p', '--provider', choices=AI_PROVIDER_NAMES, help='Only this provider')
    refresh.add_argument('--clear', action='store_true', help='Clear the cache instead of refreshing')

    credentials = config_sub.add_parser('credentials', help='Manage stored API keys')
    cred_sub = credentials.add_subparsers(dest='credentials_command', metavar='ACTION')
    cred_sub.add_parser('show', help='Show where each key is found')
    cred_set = cred_sub.add_parser('set', help='Store a key')
    cred_set.add_argument('provider', choices=PROVIDER_NAMES)
    cred_set.add_argument('--storage', choices=['auto', 'keychain', 'env'], help='Where to store it')
    cred_remove = cred_sub.add_parser('remove', help='Remove a key from every store')
    cred_remove.add_argument('provider', choices=PROVIDER_NAMES)

    config_sub.add_parser('show-prompt-template', help='Print the active prompt template')
    config_sub.add_parser('reset-prompt-template', help='Go back to the built-in prompt template')

    tokens = sub.add_parser('tokens', help='Show token usage')
    tokens.add_argument('--days', type=int, metavar='N', help='Only the last N days')
    tokens.add_argument('--clear', action='store_true', help='Delete the usage history')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
