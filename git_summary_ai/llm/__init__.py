"""LLM Client Package"""

from git_summary_ai.llm.base import LLMClient, LLMError, SummaryRequest, SummaryResponse, TokenUsage
from git_summary_ai.llm.claude import ClaudeClient
from git_summary_ai.llm.gemini import GeminiClient
from git_summary_ai.llm.openai import OpenAIClient, GitHubModelsClient
from git_summary_ai.llm.prompt import DEFAULT_PROMPT_TEMPLATE, build_summary_prompt, parse_summary_response
from git_summary_ai.providers import Provider

PROVIDERS: dict[Provider, type[LLMClient]] = {
    Provider.CLAUDE: ClaudeClient,
    Provider.OPENAI: OpenAIClient,
    Provider.COPILOT: GitHubModelsClient,
    Provider.GEMINI: GeminiClient,
}


def get_client(
    provider: Provider,
    api_key: str,
    model: str,
    max_tokens: int | None = None,
    prompt_template: str | None = None,
) -> LLMClient:
    """Build the client for a provider."""
    client_class = PROVIDERS.get(Provider(provider))
    if client_class is None:
        raise LLMError(f"Provider '{provider}' cannot generate summaries. Use one of: "
                       + ", ".join(p.value for p in PROVIDERS))
    return client_class(api_key=api_key, model=model, max_tokens=max_tokens, prompt_template=prompt_template)


__all__ = [
    "LLMClient",
    "LLMError",
    "SummaryRequest",
    "SummaryResponse",
    "TokenUsage",
    "ClaudeClient",
    "OpenAIClient",
    "GitHubModelsClient",
    "GeminiClient",
    "get_client",
    "PROVIDERS",
    "DEFAULT_PROMPT_TEMPLATE",
    "build_summary_prompt",
    "parse_summary_response",
]
