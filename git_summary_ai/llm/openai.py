"""OpenAI-compatible Chat Completions Client (OpenAI and GitHub Models)"""

from git_summary_ai.llm.base import LLMClient, LLMError, SummaryRequest, SummaryResponse, TokenUsage
from git_summary_ai.llm.http import post_json
from git_summary_ai.llm.prompt import build_summary_prompt, parse_summary_response

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
GITHUB_MODELS_CHAT_URL = "https://models.inference.ai.azure.com/chat/completions"


class OpenAIClient(LLMClient):
    """Plain REST client; the same wire format serves both endpoints."""

    SERVICE = "OpenAI"
    URL = OPENAI_CHAT_URL

    @property
    def name(self) -> str:
        return f"{self.SERVICE} ({self.model})"

    def _payload(self, prompt: str) -> dict:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        # Reasoning models reject max_tokens
        if self.model.rsplit("/", 1)[-1].startswith(("o1", "o3", "o4")):
            payload["max_completion_tokens"] = self.max_tokens
        else:
            payload["max_tokens"] = self.max_tokens
        return payload

    def generate_summary(self, request: SummaryRequest) -> SummaryResponse:
        prompt = build_summary_prompt(request, self.prompt_template)
        result = post_json(
            self.URL,
            self._payload(prompt),
            {"Authorization": f"Bearer {self.api_key}"},
            service=self.SERVICE,
        )

        try:
            content = result["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            raise LLMError(f"Unexpected response shape from {self.SERVICE}")

        title, summary, commit_message = parse_summary_response(content)
        usage = None
        if isinstance(result.get("usage"), dict):
            usage = TokenUsage(
                result["usage"].get("prompt_tokens", 0),
                result["usage"].get("completion_tokens", 0),
            )

        return SummaryResponse(summary=summary, commit_message=commit_message, title=title, usage=usage)


class GitHubModelsClient(OpenAIClient):
    """GitHub Models, authenticated with a GitHub token."""

    SERVICE = "GitHub Models"
    URL = GITHUB_MODELS_CHAT_URL
