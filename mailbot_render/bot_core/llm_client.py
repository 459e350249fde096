"""
HTTP clients for the two summarization backends.

Both take a ready prompt and return the model's text. They perform exactly
one request per call: no throttling, no retries. Transport errors from
``requests`` are raised unchanged; empty or malformed replies raise
``LLMClientError``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

import requests

from ..config_loader import WorkersAIBinding

log = logging.getLogger(__name__)

WORKERS_AI_URL = "https://api.cloudflare.com/client/v4/accounts/{account_id}/ai/run/{model}"


class LLMClientError(Exception):
    """Raised when a backend answers without usable text."""


def _post_json(url: str, token: str, payload: Dict[str, Any], timeout: int) -> Dict[str, Any]:
    response = requests.post(
        url,
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        },
        json=payload,
        timeout=timeout,
    )
    response.raise_for_status()
    try:
        return response.json()
    except ValueError as exc:
        raise LLMClientError(f"Invalid JSON from {url}") from exc


async def summarize_by_workers_ai(
    binding: WorkersAIBinding,
    model: str,
    prompt: str,
    timeout: int = 30,
) -> str:
    """
    Run ``prompt`` through a Cloudflare Workers AI text model.

    Args:
        binding: Cloudflare account id and API token
        model: Model name, e.g. ``@cf/meta/llama-3-8b-instruct``
        prompt: Complete user prompt
        timeout: Request timeout in seconds

    Returns:
        The ``result.response`` field of the reply
    """
    url = WORKERS_AI_URL.format(account_id=binding.account_id, model=model)
    payload = {"messages": [{"role": "user", "content": prompt}]}
    log.debug("Workers AI request: model=%s prompt_chars=%d", model, len(prompt))

    data = await asyncio.to_thread(_post_json, url, binding.api_token, payload, timeout)

    result = data.get("result") or {}
    text = result.get("response") if isinstance(result, dict) else None
    if not isinstance(text, str) or not text.strip():
        raise LLMClientError("Empty Workers AI response")
    return text


async def summarize_by_openai(
    api_key: str,
    endpoint: str,
    model: str,
    prompt: str,
    timeout: int = 30,
) -> str:
    """
    Run ``prompt`` through an OpenAI-compatible chat-completions endpoint.

    Args:
        api_key: Bearer token for the endpoint
        endpoint: Full chat-completions URL
        model: Chat model name
        prompt: Complete user prompt
        timeout: Request timeout in seconds

    Returns:
        ``choices[0].message.content`` of the reply
    """
    payload = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
    }
    log.debug("OpenAI request: endpoint=%s model=%s prompt_chars=%d", endpoint, model, len(prompt))

    data = await asyncio.to_thread(_post_json, endpoint, api_key, payload, timeout)

    try:
        text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LLMClientError("Malformed chat completion response") from exc
    if not isinstance(text, str) or not text.strip():
        raise LLMClientError("Empty chat completion response")
    return text


__all__ = ["LLMClientError", "summarize_by_openai", "summarize_by_workers_ai"]
