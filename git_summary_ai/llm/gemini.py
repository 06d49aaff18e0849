"""Google Gemini LLM Client"""

from git_summary_ai.llm.base import LLMClient, LLMError, SummaryRequest, SummaryResponse, TokenUsage
from git_summary_ai.llm.http import post_json
from git_summary_ai.llm.prompt import build_summary_prompt, parse_summary_response

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient(LLMClient):
    """generateContent over REST."""

    @property
    def name(self) -> str:
        return f"Gemini ({self.model})"

    def generate_summary(self, request: SummaryRequest) -> SummaryResponse:
        prompt = build_summary_prompt(request, self.prompt_template)
        result = post_json(
            f"{GEMINI_API_BASE}/{self.model}:generateContent",
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {"maxOutputTokens": self.max_tokens},
            },
            {"x-goog-api-key": self.api_key},
            service="Gemini",
        )

        try:
            parts = result["candidates"][0]["content"]["parts"]
            content = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError):
            raise LLMError("Unexpected response shape from Gemini (the reply may have been blocked)")

        title, summary, commit_message = parse_summary_response(content)
        usage = None
        metadata = result.get("usageMetadata")
        if isinstance(metadata, dict):
            usage = TokenUsage(metadata.get("promptTokenCount", 0), metadata.get("candidatesTokenCount", 0))

        return SummaryResponse(summary=summary, commit_message=commit_message, title=title, usage=usage)
