"""Model Fetcher - list live models from each provider's catalog endpoint."""

import http.client
import json
import logging
import socket
import urllib.error
import urllib.request
from typing import Callable

from git_summary_ai.models.types import CachedModel, FetchResult
from git_summary_ai.providers import Provider

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

CLAUDE_MODELS_URL = "https://api.anthropic.com/v1/models"
OPENAI_MODELS_URL = "https://api.openai.com/v1/models"
GITHUB_MODELS_URL = "https://models.inference.ai.azure.com/models"
GEMINI_MODELS_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# OpenAI lists every model it has; these are not chat models
OPENAI_EXCLUDED_MARKERS = ("embedding", "audio", "realtime", "transcribe", "tts", "image", "search")

REASONING_PREFIXES = ("o1", "o3", "o4")


class ModelFetchError(Exception):
    """Raised inside the fetcher; converted to a failed FetchResult before leaving it."""
    pass


def _require_list(payload, key: str) -> list:
    items = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise ModelFetchError("Invalid API response format")
    return items


def _newest_first(models: list[CachedModel]) -> list[CachedModel]:
    return sorted(models, key=lambda m: m.id, reverse=True)


def parse_claude_models(payload) -> list[CachedModel]:
    models = [
        CachedModel(id=item["id"], display_name=item.get("display_name") or item["id"], provider=Provider.CLAUDE)
        for item in _require_list(payload, "data")
        if isinstance(item, dict) and isinstance(item.get("id"), str) and "claude" in item["id"]
    ]
    if not models:
        raise ModelFetchError("No Claude models found in API response")
    return models


def parse_openai_models(payload) -> list[CachedModel]:
    models = [
        CachedModel(id=item["id"], display_name=item["id"], provider=Provider.OPENAI)
        for item in _require_list(payload, "data")
        if isinstance(item, dict) and isinstance(item.get("id"), str) and "gpt" in item["id"]
        and not any(marker in item["id"] for marker in OPENAI_EXCLUDED_MARKERS)
    ]
    if not models:
        raise ModelFetchError("No GPT models found in API response")
    return _newest_first(models)


def parse_copilot_models(payload) -> list[CachedModel]:
    # The GitHub Models catalog has shipped both a bare list and {"data": [...]}
    items = payload if isinstance(payload, list) else _require_list(payload, "data")
    models = []
    for item in items:
        if not isinstance(item, dict):
            continue
        model_id = item.get("id") or item.get("name")
        if not isinstance(model_id, str) or not model_id:
            continue
        short_id = model_id.rsplit("/", 1)[-1]
        if "gpt" in short_id or short_id.startswith(REASONING_PREFIXES):
            models.append(CachedModel(
                id=model_id,
                display_name=item.get("friendly_name") or model_id,
                provider=Provider.COPILOT,
            ))
    if not models:
        raise ModelFetchError("No models found in API response")
    return _newest_first(models)


def parse_gemini_models(payload) -> list[CachedModel]:
    models = []
    for item in _require_list(payload, "models"):
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue
        if "generateContent" not in (item.get("supportedGenerationMethods") or []):
            continue
        model_id = item["name"].removeprefix("models/")
        models.append(CachedModel(
            id=model_id,
            display_name=item.get("displayName") or model_id,
            provider=Provider.GEMINI,
        ))
    if not models:
        raise ModelFetchError("No Gemini models with generateContent support found")
    return _newest_first(models)


class ModelFetcher:
    """One GET per call, no retries. Never raises: every failure becomes a FetchResult."""

    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._adapters: dict[Provider, tuple[str, Callable[[str], list[CachedModel]]]] = {
            Provider.CLAUDE: ("Claude", self._fetch_claude),
            Provider.OPENAI: ("OpenAI", self._fetch_openai),
            Provider.COPILOT: ("GitHub Models", self._fetch_copilot),
            Provider.GEMINI: ("Gemini", self._fetch_gemini),
        }

    def fetch_models(self, provider: Provider, api_key: str) -> FetchResult:
        provider = Provider(provider)
        adapter = self._adapters.get(provider)
        if adapter is None:
            return FetchResult(provider=provider, success=False, error=f"No model catalog for provider: {provider.value}")

        label, fetch = adapter
        try:
            models = fetch(api_key)
        except (ModelFetchError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug(f"Model fetch for {provider.value} failed: {e}")
            return FetchResult(provider=provider, success=False, error=f"Failed to fetch {label} models: {e}")

        logger.debug(f"Fetched {len(models)} {provider.value} models")
        return FetchResult(provider=provider, success=True, models=models)

    def _get_json(self, url: str, headers: dict[str, str]):
        req = urllib.request.Request(url, headers={"Accept": "application/json", **headers})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")[:200] if e.fp else e.reason
            raise ModelFetchError(f"HTTP {e.code}: {detail}")
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise ModelFetchError(f"Request timed out after {self.timeout}s")
            raise ModelFetchError(f"Request failed: {e.reason}")
        except (socket.timeout, TimeoutError):
            raise ModelFetchError(f"Request timed out after {self.timeout}s")
        except http.client.HTTPException as e:
            raise ModelFetchError(f"Incomplete response: {e}")
        except OSError as e:
            raise ModelFetchError(f"Connection failed: {e}")

        try:
            return json.loads(body)
        except json.JSONDecodeError:
            raise ModelFetchError("Response was not valid JSON")

    def _fetch_claude(self, api_key: str) -> list[CachedModel]:
        payload = self._get_json(CLAUDE_MODELS_URL, {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        })
        return parse_claude_models(payload)

    def _fetch_openai(self, api_key: str) -> list[CachedModel]:
        payload = self._get_json(OPENAI_MODELS_URL, {"Authorization": f"Bearer {api_key}"})
        return parse_openai_models(payload)

    def _fetch_copilot(self, api_key: str) -> list[CachedModel]:
        payload = self._get_json(GITHUB_MODELS_URL, {"Authorization": f"Bearer {api_key}"})
        return parse_copilot_models(payload)

    def _fetch_gemini(self, api_key: str) -> list[CachedModel]:
        payload = self._get_json(GEMINI_MODELS_URL, {"x-goog-api-key": api_key})
        return parse_gemini_models(payload)
