"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class SummaryRequest:
    """What the model is asked to summarize."""
    diff: str
    branch: str
    files_changed: list[str] = field(default_factory=list)
    insertions: int = 0
    deletions: int = 0
    custom_instructions: str | None = None


@dataclass
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class SummaryResponse:
    """Structured response from any LLM provider."""
    summary: str
    commit_message: str
    title: str | None = None
    usage: TokenUsage | None = None


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class LLMClient(ABC):
    """Abstract base for LLM clients."""

    DEFAULT_MAX_TOKENS = 1024

    def __init__(self, api_key: str, model: str, max_tokens: int | None = None, prompt_template: str | None = None):
        if not api_key:
            raise LLMError(f"No API key given to {type(self).__name__}")
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.prompt_template = prompt_template

    @abstractmethod
    def generate_summary(self, request: SummaryRequest) -> SummaryResponse:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
