"""Provider identifiers and per-provider metadata."""

from dataclasses import dataclass
from enum import Enum


class Provider(str, Enum):
    """Every external service the tool holds a credential for."""
    CLAUDE = "claude"
    OPENAI = "openai"
    COPILOT = "copilot"
    GEMINI = "gemini"
    GITHUB = "github"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProviderInfo:
    """Static facts about a provider."""
    env_var: str
    display_name: str
    env_alias: str | None = None

    @property
    def env_vars(self) -> tuple[str, ...]:
        """Env var names in lookup order: canonical first, then the legacy alias."""
        if self.env_alias:
            return (self.env_var, self.env_alias)
        return (self.env_var,)


# Single source of truth: adding a provider means adding a row here
PROVIDER_INFO: dict[Provider, ProviderInfo] = {
    Provider.CLAUDE: ProviderInfo("CLAUDE_API_KEY", "Claude (Anthropic)", env_alias="ANTHROPIC_API_KEY"),
    Provider.OPENAI: ProviderInfo("OPENAI_API_KEY", "OpenAI"),
    Provider.COPILOT: ProviderInfo("GITHUB_TOKEN", "GitHub Models"),
    Provider.GEMINI: ProviderInfo("GEMINI_API_KEY", "Google Gemini", env_alias="GOOGLE_API_KEY"),
    Provider.GITHUB: ProviderInfo("GITHUB_TOKEN", "GitHub"),
}

# Providers that serve models (GitHub itself only hosts the repository)
AI_PROVIDERS: tuple[Provider, ...] = (
    Provider.CLAUDE,
    Provider.OPENAI,
    Provider.COPILOT,
    Provider.GEMINI,
)

AI_PROVIDER_NAMES = [p.value for p in AI_PROVIDERS]
PROVIDER_NAMES = [p.value for p in Provider]


def parse_provider(name: "str | Provider", ai_only: bool = False) -> Provider:
    """Turn user input into a Provider, raising ValueError on anything unknown."""
    valid = AI_PROVIDER_NAMES if ai_only else PROVIDER_NAMES
    value = name.value if isinstance(name, Provider) else str(name).strip().lower()
    if value not in valid:
        raise ValueError(f"Invalid provider: {name}. Valid providers: {', '.join(valid)}")
    return Provider(value)


def display_name(provider: Provider) -> str:
    return PROVIDER_INFO[provider].display_name
