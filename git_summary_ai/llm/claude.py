"""Claude (Anthropic) LLM Client"""

from anthropic import Anthropic, APIError, AuthenticationError

from git_summary_ai.llm.base import LLMClient, LLMError, SummaryRequest, SummaryResponse, TokenUsage
from git_summary_ai.llm.prompt import build_summary_prompt, parse_summary_response


class ClaudeClient(LLMClient):
    """Claude API client through the official SDK."""

    def __init__(self, api_key: str, model: str, max_tokens: int | None = None, prompt_template: str | None = None):
        super().__init__(api_key, model, max_tokens, prompt_template)
        self._client = Anthropic(api_key=self.api_key)

    @property
    def name(self) -> str:
        return f"Claude ({self.model})"

    def generate_summary(self, request: SummaryRequest) -> SummaryResponse:
        prompt = build_summary_prompt(request, self.prompt_template)

        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except AuthenticationError:
            raise LLMError("Invalid API key. Check your CLAUDE_API_KEY or run 'git-summary-ai setup'.")
        except APIError as e:
            raise LLMError(f"Claude API error: {e.message}")

        content = ""
        for block in response.content:
            if block.type == "text":
                content = block.text.strip()
                break

        title, summary, commit_message = parse_summary_response(content)
        usage = None
        if response.usage:
            usage = TokenUsage(response.usage.input_tokens, response.usage.output_tokens)

        return SummaryResponse(summary=summary, commit_message=commit_message, title=title, usage=usage)
