"""
Ollama client for LLM interactions.
"""
import json
import logging
import re
from typing import Dict, Optional, Tuple

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..common.config import settings
from ..common.errors import LlmError

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```(?:json)?")


def _build_headers(api_key: str) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def get_ollama_config() -> Tuple[str, Dict[str, str], str]:
    base_url = settings.OLLAMA_HOST.rstrip("/")
    headers = _build_headers(settings.OLLAMA_API_KEY)
    return base_url, headers, settings.LLM_MODEL


def strip_fences(content: str) -> str:
    """Drop Markdown code fences some models wrap around JSON."""
    return FENCE_PATTERN.sub("", content).strip()


def parse_json_content(content: Optional[str]) -> dict:
    text = strip_fences(content or "")
    if not text:
        raise LlmError("Empty reply from LLM")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LlmError(f"Failed to parse JSON: {e}; raw={text[:200]!r}") from e
    if not isinstance(data, dict):
        raise LlmError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _is_transient(exc: BaseException) -> bool:
    """Connection problems and 5xx replies; 4xx (e.g. unknown model) are permanent."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


@retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(3),
    wait=wait_exponential(min=1, max=8),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def chat_json(
    prompt: str,
    system: str = "",
    temperature: float = 0.2,
    json_only: bool = True,
    model_override: Optional[str] = None,
) -> dict:
    """Call Ollama and get JSON response."""
    base_url, headers, model = get_ollama_config()
    if model_override:
        model = model_override

    sys_msgs = ([{"role": "system", "content": system}] if system else [])
    user_msg = {"role": "user", "content": prompt}
    messages = sys_msgs + [user_msg]

    url = base_url + "/api/chat"
    payload = {
        "model": model,
        "messages": messages,
        "options": {"temperature": temperature},
        "stream": False
    }

    if json_only:
        payload["format"] = "json"

    logger.debug("POST %s model=%s", url, model)
    with httpx.Client(timeout=settings.LLM_TIMEOUT, headers=headers) as client:
        r = client.post(url, json=payload)
        r.raise_for_status()
        try:
            data = r.json()
        except ValueError as e:
            raise LlmError(f"Non-JSON response body from {url}: {r.text[:200]!r}") from e

    return parse_json_content(_extract_content(data))


def _extract_content(data) -> Optional[str]:
    """Pull the reply text out of an /api/chat (or /api/generate) body."""
    if not isinstance(data, dict):
        raise LlmError(f"Unexpected response body: {type(data).__name__}")
    message = data.get("message")
    if message is not None and not isinstance(message, dict):
        raise LlmError(f"Unexpected 'message' field: {message!r:.200}")
    content = (message or {}).get("content") or data.get("response")
    if content is not None and not isinstance(content, str):
        raise LlmError(f"Unexpected content type: {type(content).__name__}")
    return content


__all__ = ["chat_json", "get_ollama_config", "parse_json_content", "strip_fences"]
