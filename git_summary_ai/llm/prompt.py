"""Summary Prompt - build the request text and parse the model's answer."""

import json
import re

from git_summary_ai.llm.base import SummaryRequest

MAX_DIFF_CHARS = 15000

TRUNCATION_NOTE = "[... diff truncated for length ...]"

DEFAULT_PROMPT_TEMPLATE = """You are a helpful assistant that generates clear, concise commit summaries for code reviews.

Analyze the following git diff and generate a detailed, topic-grouped commit message.

## Context
{context}

## Git Diff
```diff
{diff}
```
{customInstructions}
## Output Format
Respond in the following JSON format only, with no additional text:
{
  "title": "feat: short conventional commit title (max 72 chars)",
  "summary": "## Primary changes\\n- Key change 1\\n- Key change 2",
  "commitMessage": "Combined title + summary"
}

Guidelines for the title:
- Use conventional commit format: type(scope): description
- Types: feat, fix, refactor, docs, test, perf, chore, style, ci, build
- Keep under 72 characters

Guidelines for the summary:
- Group changes by topic area (e.g., ## Security, ## Testing, ## API)
- Use concise bullet points with specific details
- Mention file names when relevant
- Highlight security fixes, breaking changes and performance improvements
- This becomes the commit message body, so make it informative"""


def truncate_diff(diff: str, max_chars: int = MAX_DIFF_CHARS) -> str:
    """Cut on a line boundary and say so."""
    if len(diff) <= max_chars:
        return diff
    cut = diff[:max_chars]
    last_newline = cut.rfind('\n')
    if last_newline > 0:
        cut = cut[:last_newline]
    return f"{cut}\n\n{TRUNCATION_NOTE}"


def _context_block(request: SummaryRequest) -> str:
    return "\n".join([
        f"- Branch: {request.branch}",
        f"- Files changed: {len(request.files_changed)}",
        f"- Lines added: +{request.insertions}",
        f"- Lines removed: -{request.deletions}",
    ])


def build_summary_prompt(request: SummaryRequest, template: str | None = None) -> str:
    """Fill the template's {diff}, {context} and {customInstructions} slots.

    Plain replacement rather than str.format so user templates may contain
    braces (JSON examples) without escaping them.
    """
    instructions = ""
    if request.custom_instructions:
        instructions = f"\n## Additional Instructions\n{request.custom_instructions}\n"

    return (
        (template or DEFAULT_PROMPT_TEMPLATE)
        .replace("{context}", _context_block(request))
        .replace("{customInstructions}", instructions)
        .replace("{diff}", truncate_diff(request.diff))
    )


def parse_summary_response(text: str) -> tuple[str | None, str, str]:
    """Return (title, summary, commit_message) from a model reply.

    The reply should be a JSON object, possibly wrapped in prose or a code
    fence. Anything else is used verbatim as both summary and message.
    """
    match = re.search(r'\{[\s\S]*\}', text)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            title = str(parsed.get("title") or "").strip() or None
            summary = str(parsed.get("summary") or "").strip() or "Unable to generate summary"
            if title:
                commit_message = f"{title}\n\n{summary}"
            else:
                commit_message = str(parsed.get("commitMessage") or "").strip() or summary
            return title, summary, commit_message

    stripped = text.strip()
    return None, stripped, stripped
