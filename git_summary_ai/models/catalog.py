"""Static Model Table - bundled fallback when no live catalog is reachable."""

from dataclasses import dataclass

from git_summary_ai.providers import Provider


@dataclass(frozen=True)
class StaticModel:
    id: str
    name: str
    description: str
    default: bool = False


# Every AI provider must keep at least one entry and exactly one default
AVAILABLE_MODELS: dict[Provider, tuple[StaticModel, ...]] = {
    Provider.CLAUDE: (
        StaticModel("claude-sonnet-4-20250514", "Claude Sonnet 4 (Latest)",
                    "Most capable model, best for complex tasks", default=True),
        StaticModel("claude-3-7-sonnet-20250219", "Claude 3.7 Sonnet",
                    "Balanced performance and speed"),
        StaticModel("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet",
                    "Previous generation, still highly capable"),
        StaticModel("claude-3-5-haiku-20241022", "Claude 3.5 Haiku",
                    "Faster responses, lower cost"),
    ),
    Provider.OPENAI: (
        StaticModel("gpt-4o", "GPT-4o", "Most capable multimodal model", default=True),
        StaticModel("gpt-4o-mini", "GPT-4o Mini", "Faster and more affordable"),
        StaticModel("gpt-4-turbo", "GPT-4 Turbo", "Previous generation flagship"),
        StaticModel("gpt-3.5-turbo", "GPT-3.5 Turbo", "Fast and cost-effective"),
    ),
    Provider.COPILOT: (
        StaticModel("gpt-4o-mini", "GPT-4o Mini", "Default GitHub Models endpoint", default=True),
        StaticModel("gpt-4o", "GPT-4o", "More capable, may have rate limits"),
        StaticModel("o1-preview", "O1 Preview", "Advanced reasoning model"),
        StaticModel("o1-mini", "O1 Mini", "Smaller reasoning model"),
    ),
    Provider.GEMINI: (
        StaticModel("gemini-2.0-flash", "Gemini 2.0 Flash", "Fast, well-rounded default", default=True),
        StaticModel("gemini-1.5-pro", "Gemini 1.5 Pro", "Long context, stronger reasoning"),
        StaticModel("gemini-1.5-flash", "Gemini 1.5 Flash", "Previous generation, low latency"),
    ),
}


def static_models(provider: Provider) -> tuple[StaticModel, ...]:
    return AVAILABLE_MODELS.get(Provider(provider), ())


def find_static_model(provider: Provider, model_id: str) -> StaticModel | None:
    return next((m for m in static_models(provider) if m.id == model_id), None)


def get_default_model(provider: Provider) -> str:
    models = static_models(provider)
    if not models:
        raise ValueError(f"No models are known for provider '{provider}'")
    default = next((m for m in models if m.default), models[0])
    return default.id


def is_valid_model_static(provider: Provider, model_id: str) -> bool:
    return find_static_model(provider, model_id) is not None


def get_model_name(provider: Provider, model_id: str) -> str:
    model = find_static_model(provider, model_id)
    return model.name if model else model_id
