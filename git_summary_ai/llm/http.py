"""JSON-over-HTTP helper shared by the REST based clients."""

import http.client
import json
import socket
import urllib.error
import urllib.request

from git_summary_ai.llm.base import LLMError

DEFAULT_TIMEOUT = 120  # seconds


def post_json(url: str, payload: dict, headers: dict[str, str], service: str, timeout: float = DEFAULT_TIMEOUT) -> dict:
    """POST a JSON body and decode the JSON reply, mapping failures to LLMError."""
    data = json.dumps(payload).encode('utf-8')
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", **headers},
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return json.loads(response.read().decode('utf-8'))
    except urllib.error.HTTPError as e:
        if e.code in (401, 403):
            raise LLMError(f"{service} rejected the API key ({e.code}). Run 'git-summary-ai setup' to update it.")
        if e.code == 404:
            raise LLMError(f"{service} model or endpoint not found (404). Check the configured model.")
        if e.code == 429:
            raise LLMError(f"{service} rate limit reached (429). Try again shortly.")
        raise LLMError(f"{service} error ({e.code}): {e.reason}")
    except urllib.error.URLError as e:
        if isinstance(e.reason, socket.timeout):
            raise LLMError(f"{service} request timed out after {timeout}s")
        raise LLMError(f"{service} request failed: {e.reason}")
    except (socket.timeout, TimeoutError):
        raise LLMError(f"{service} request timed out after {timeout}s")
    except json.JSONDecodeError:
        raise LLMError(f"Invalid response from {service}")
    except http.client.HTTPException as e:
        raise LLMError(f"Incomplete response from {service}: {e}")
