from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from mailbot_render.bot_core import llm_client
from mailbot_render.config_loader import RenderConfig
from mailbot_render.models import EmailRecord

log = logging.getLogger(__name__)

NO_PROVIDER_TEXT = "Sorry, no summarization provider is configured."
FAILURE_PREFIX = "Failed to summarize the email: "

SUMMARY_PROMPT = (
    "Summarize the following email in {lang}, in about 50 words, as plain text "
    "without any markdown formatting. Begin with the line \"This is an email sent to "
    "{recipient}\" followed by one blank line. If the email is a verification code or "
    "one-time password message, write the code on its own line, then a blank line, "
    "then the summary. Otherwise write the summary directly.\n"
    "Email content:\n\n{text}"
)


def build_summary_prompt(mail: EmailRecord, target_lang: str) -> str:
    return SUMMARY_PROMPT.format(lang=target_lang, recipient=mail.recipient, text=mail.text or "")


@dataclass(frozen=True)
class SummaryProvider:
    name: str
    is_available: Callable[[RenderConfig], bool]
    call: Callable[[RenderConfig, str], Awaitable[str]]


@dataclass(frozen=True)
class SummaryResult:
    text: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _call_workers_ai(config: RenderConfig, prompt: str) -> str:
    return await llm_client.summarize_by_workers_ai(config.workers_ai_binding, config.workers_ai_model, prompt)


async def _call_openai(config: RenderConfig, prompt: str) -> str:
    return await llm_client.summarize_by_openai(
        config.openai_api_key,
        config.openai_completions_api,
        config.openai_chat_model,
        prompt,
    )


# Checked in order; the first available provider wins.
SUMMARY_PROVIDERS: List[SummaryProvider] = [
    SummaryProvider("workers-ai", lambda config: config.has_workers_ai, _call_workers_ai),
    SummaryProvider("openai", lambda config: config.has_openai, _call_openai),
]


def select_provider(config: RenderConfig) -> Optional[SummaryProvider]:
    for provider in SUMMARY_PROVIDERS:
        if provider.is_available(config):
            return provider
    return None


async def summarize_email(mail: EmailRecord, config: RenderConfig) -> Optional[SummaryResult]:
    """Summarize ``mail`` with the first configured provider.

    Returns ``None`` when no provider is configured. Provider failures are
    captured in the result instead of being raised.
    """

    provider = select_provider(config)
    if provider is None:
        return None

    log.debug("Summarizing email %s via %s", mail.id, provider.name)
    prompt = build_summary_prompt(mail, config.summary_target_lang)
    try:
        text = await provider.call(config, prompt)
    except Exception as exc:  # noqa: BLE001
        log.warning("Summarization of email %s via %s failed: %s", mail.id, provider.name, exc)
        return SummaryResult(error=exc)
    return SummaryResult(text=text)


def format_summary(result: Optional[SummaryResult]) -> str:
    if result is None:
        return NO_PROVIDER_TEXT
    if not result.ok:
        return f"{FAILURE_PREFIX}{result.error}"
    return result.text or ""


__all__ = [
    "FAILURE_PREFIX",
    "NO_PROVIDER_TEXT",
    "SUMMARY_PROVIDERS",
    "SummaryProvider",
    "SummaryResult",
    "build_summary_prompt",
    "format_summary",
    "select_provider",
    "summarize_email",
]
