"""CLI Commands - setup, configuration, credentials, models and token usage."""

import os
from datetime import timedelta

from git_summary_ai import APP_NAME
from git_summary_ai.credentials import StoragePreference, mask_secret
from git_summary_ai.llm import DEFAULT_PROMPT_TEMPLATE
from git_summary_ai.models import OutcomeStatus, get_model_name
from git_summary_ai.models.types import utc_now
from git_summary_ai.output import (
    CHECK, CROSS, bold, detail, dim, error, info, print_error, print_info, print_success,
    print_warning, success, warning,
)
from git_summary_ai.providers import AI_PROVIDERS, PROVIDER_INFO, Provider, display_name, parse_provider

from git_summary_ai.cli.context import MODEL_ENV_VAR, PROVIDER_ENV_VAR, AppContext
from git_summary_ai.cli.utils import ask_secret, choose, confirm


# ---------------------------------------------------------------------------
# setup
# ---------------------------------------------------------------------------

def run_setup(ctx: AppContext) -> int:
    """Interactive wizard: provider, key, storage."""
    print(f"\n{bold('Setup Wizard')}\n")

    print("Choose provider:\n")
    current = ctx.config.provider
    options = [(p.value, display_name(p)) for p in AI_PROVIDERS]
    default = next((i for i, (value, _) in enumerate(options) if value == current), 0)
    choice = choose("Select", options, default)
    if choice is None:
        print(dim("Cancelled."))
        return 0
    provider = Provider(choice)
    env_var = PROVIDER_INFO[provider].env_var

    existing = ctx.credentials.get_api_key(provider)
    if existing:
        print(f"\n{dim('A key is already configured:')} {mask_secret(existing)}")
        replace = confirm("Replace it?", default=False)
    else:
        replace = True

    storage = ctx.config.credential_storage
    if replace:
        key = ask_secret(f"\nPaste your {display_name(provider)} API key ({env_var}): ")
        if not key:
            print_error("No key entered, nothing saved")
            return 1

        print("\nWhere should the key be stored?\n")
        keychain_label = "OS keychain" if ctx.credentials.is_keychain_available() else "OS keychain (not available here)"
        storage = choose("Select", [
            (StoragePreference.AUTO.value, "Automatic (keychain when available, else .env file)"),
            (StoragePreference.KEYCHAIN.value, keychain_label),
            (StoragePreference.ENV.value, ".env file"),
        ]) or StoragePreference.AUTO.value

        label = ctx.credentials.set_api_key(provider, key, storage=storage)
        print_success(f"Saved {env_var} to {label}")

    path = ctx.config_manager.update_global(provider=provider.value, credential_storage=storage)
    ctx.reload_config()
    print_success(f"Saved settings to {path}")
    print(f"\n{dim('Next:')} {APP_NAME} summarize\n")
    return 0


# ---------------------------------------------------------------------------
# config show / set-provider / set-model
# ---------------------------------------------------------------------------

def display_config(ctx: AppContext) -> int:
    config = ctx.config

    print(f"\n{bold('Current Configuration')}\n")

    sources = ctx.config_manager.loaded_from()
    if sources:
        for path in sources:
            print(f"  {dim('Loaded from:')} {path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no config file found)")

    env_provider = os.environ.get(PROVIDER_ENV_VAR)
    env_model = os.environ.get(MODEL_ENV_VAR)
    if env_provider or env_model:
        print(f"  {dim('Environment overrides:')}")
        if env_provider:
            print(f"    {PROVIDER_ENV_VAR}={env_provider}")
        if env_model:
            print(f"    {MODEL_ENV_VAR}={env_model}")

    provider = ctx.resolve_provider()
    print()
    print(f"  {bold('Settings:')}")
    print(f"    provider:          {info(provider.value)}")
    print(f"    model:             {info(ctx.resolve_model(provider))}")
    print(f"    targetBranch:      {info(config.target_branch)}")
    print(f"    maxTokens:         {info(str(config.max_tokens))}")
    print(f"    credentialStorage: {info(config.credential_storage)}")
    print(f"    envLocation:       {info(config.env_location)}")
    print(f"    promptTemplate:    {info('custom' if config.prompt_template else 'default')}")
    if config.exclude_patterns:
        print(f"    excludePatterns:   {info(', '.join(config.exclude_patterns))}")
    if config.models:
        print(f"    models:")
        for name, model in sorted(config.models.items()):
            print(f"      {name}: {info(model)}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Global:  {ctx.config_manager.global_path}")
    print(f"    Project: .git-summary-airc (in current directory)")
    print()
    return 0


def set_provider(ctx: AppContext, name: str) -> int:
    provider = parse_provider(name, ai_only=True)
    path = ctx.config_manager.update_global(provider=provider.value)
    print_success(f"Default provider set to {bold(provider.value)} ({path})")

    if not ctx.credentials.get_api_key(provider):
        print_warning(f"No API key found for {provider.value}. Set {PROVIDER_INFO[provider].env_var} or run '{APP_NAME} setup'")
    return 0


def set_model(ctx: AppContext, name: str, model: str) -> int:
    provider = parse_provider(name, ai_only=True)
    api_key = ctx.credentials.get_api_key(provider)
    if not ctx.models.is_valid_model(provider, model, api_key):
        print_warning(f"'{model}' is not in the known {provider.value} models; saving it anyway")

    models = dict(ctx.config_manager.read_global().get("models") or {})
    models[provider.value] = model
    path = ctx.config_manager.update_global(models=models)
    print_success(f"{provider.value} model set to {bold(model)} ({path})")
    return 0


# ---------------------------------------------------------------------------
# models
# ---------------------------------------------------------------------------

def list_models(ctx: AppContext, name: str | None = None) -> int:
    providers = [parse_provider(name, ai_only=True)] if name else list(AI_PROVIDERS)

    for provider in providers:
        models = ctx.models.get_models(provider, ctx.credentials.get_api_key(provider))
        status = ctx.models.get_cache_status(provider)
        current = ctx.resolve_model(provider)

        source = f"cached, updated {status.age}" if status.source == "cached" else "built-in list"
        print(f"\n{bold(display_name(provider))} {dim(f'({source})')}")
        for model in models:
            marker = success(' (current)') if model.id == current else ''
            label = model.display_name if model.display_name != model.id else get_model_name(provider, model.id)
            print(f"  {model.id}{marker}")
            if label != model.id:
                print(dim(f"    {label}"))
    print()
    return 0


def refresh_models(ctx: AppContext, name: str | None = None, clear: bool = False) -> int:
    provider = parse_provider(name, ai_only=True) if name else None

    if clear:
        if provider:
            ctx.models.clear_cache(provider)
            print_success(f"Cleared cached {provider.value} models")
        else:
            ctx.models.clear_all_caches()
            print_success("Cleared all cached models")
        return 0

    providers = [provider] if provider else list(AI_PROVIDERS)
    print(f"\n{bold('Refreshing model lists')}\n")
    result = ctx.models.refresh_all_providers(ctx.credentials.get_api_key, providers)

    for p, outcome in result.results.items():
        if outcome.status == OutcomeStatus.REFRESHED:
            print(f"  {success(CHECK)} {p.value}: {outcome.count} models")
        elif outcome.status == OutcomeStatus.NO_KEY:
            print(f"  {dim('-')} {p.value}: {dim('skipped, no API key')}")
        else:
            print(f"  {error(CROSS)} {p.value}: {outcome.error}")
    print()

    if provider and not result.succeeded:
        return 1
    return 0


# ---------------------------------------------------------------------------
# credentials
# ---------------------------------------------------------------------------

def show_credentials(ctx: AppContext) -> int:
    config = ctx.credentials.config
    print(f"\n{bold('Credentials')}\n")
    print(f"  {dim('Storage preference:')} {config.storage.value}")
    print(f"  {dim('Env file location:')}  {config.env_location.value}")
    keychain = success('available') if ctx.credentials.is_keychain_available() else warning('not available')
    print(f"  {dim('OS keychain:')}        {keychain}")

    for provider in Provider:
        key = ctx.credentials.get_api_key(provider)
        status = success(mask_secret(key)) if key else dim('not set')
        print(f"\n  {bold(display_name(provider))} ({PROVIDER_INFO[provider].env_var}): {status}")
        for row in ctx.credentials.get_storage_info(provider):
            mark = success(CHECK) if row.found else dim('-')
            print(f"    {mark} {row.location}")
    print()
    return 0


def set_credential(ctx: AppContext, name: str, storage: str | None = None) -> int:
    provider = parse_provider(name)
    env_var = PROVIDER_INFO[provider].env_var
    key = ask_secret(f"Paste your {display_name(provider)} key ({env_var}): ")
    if not key:
        print_error("No key entered, nothing saved")
        return 1

    label = ctx.credentials.set_api_key(provider, key, storage=storage)
    print_success(f"Saved {env_var} to {label}")
    if ctx.credentials.get_env_api_key(provider):
        print_warning(f"{env_var} is also set in the environment and takes precedence")
    return 0


def remove_credential(ctx: AppContext, name: str) -> int:
    provider = parse_provider(name)
    ctx.credentials.delete_api_key(provider)
    print_success(f"Removed stored {display_name(provider)} key")
    if ctx.credentials.get_env_api_key(provider):
        print_info(f"{PROVIDER_INFO[provider].env_var} is still set in your environment")
    return 0


# ---------------------------------------------------------------------------
# prompt template
# ---------------------------------------------------------------------------

def show_prompt_template(ctx: AppContext) -> int:
    template = ctx.config.prompt_template
    print(dim("# custom template" if template else "# built-in template"))
    print(template or DEFAULT_PROMPT_TEMPLATE)
    return 0


def reset_prompt_template(ctx: AppContext) -> int:
    if not ctx.config.prompt_template:
        print_info("Already using the built-in prompt template")
        return 0
    ctx.config_manager.update_global(prompt_template=None)
    print_success("Prompt template reset to the built-in default")
    if ctx.config.prompt_template:
        print_warning("A project config file still sets promptTemplate")
    return 0


# ---------------------------------------------------------------------------
# tokens
# ---------------------------------------------------------------------------

def show_tokens(ctx: AppContext, days: int | None = None, clear: bool = False) -> int:
    tracker = ctx.tracker

    if clear:
        if not confirm("Delete all token usage history?", default=False):
            print(dim("Cancelled."))
            return 0
        tracker.clear_history()
        print_success("Token usage history cleared")
        return 0

    since = None
    if days is not None:
        if days <= 0:
            print_error("--days must be a positive number")
            return 1
        since = utc_now() - timedelta(days=days)

    summary = tracker.summarize(since)
    period = f"last {days} day{'s' if days != 1 else ''}" if days else "all time"
    print(f"\n{bold('Token Usage')} {dim(f'({period})')}\n")

    if not summary.request_count:
        print(dim("  No usage recorded yet.\n"))
        return 0

    detail("Requests", str(summary.request_count))
    detail("Total tokens", f"{summary.total_tokens:,}")
    detail("Input", f"{summary.total_input:,}")
    detail("Output", f"{summary.total_output:,}")

    print(f"\n  {bold('By provider:')}")
    for name, usage in sorted(summary.by_provider.items(), key=lambda item: -item[1].tokens):
        print(f"    {name:<10} {usage.tokens:>10,} tokens  {dim(f'{usage.requests} requests')}")

    print(f"\n  {bold('By model:')}")
    for name, usage in sorted(summary.by_model.items(), key=lambda item: -item[1].tokens):
        print(f"    {name:<32} {usage.tokens:>10,} tokens  {dim(f'{usage.requests} requests')}")

    print(f"\n  {dim('Stored in')} {tracker.storage.path}\n")
    return 0


def run_config(ctx: AppContext, args) -> int:
    """Dispatch 'config <action>'."""
    action = args.config_command or 'show'
    if action == 'show':
        return display_config(ctx)
    if action == 'set-provider':
        return set_provider(ctx, args.provider)
    if action == 'set-model':
        return set_model(ctx, args.provider, args.model)
    if action == 'list-models':
        return list_models(ctx, args.provider)
    if action == 'refresh-models':
        return refresh_models(ctx, args.provider, args.clear)
    if action == 'credentials':
        sub = args.credentials_command or 'show'
        if sub == 'set':
            return set_credential(ctx, args.provider, args.storage)
        if sub == 'remove':
            return remove_credential(ctx, args.provider)
        return show_credentials(ctx)
    if action == 'show-prompt-template':
        return show_prompt_template(ctx)
    if action == 'reset-prompt-template':
        return reset_prompt_template(ctx)
    print_error(f"Unknown config action: {action}")
    return 1
