"""Telegram message rendering for cached emails.

Each email can be shown in four modes. Buttons carry callback tokens of the
form ``<prefix>:<email id>`` so the bot can route a press back to a mode:

    l  list (also used by "Back")
    p  preview
    s  summary
    d  debug

plus the static ``delete`` token.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from mailbot_render.config_loader import RenderConfig
from mailbot_render.llm.summarizer import format_summary, summarize_email
from mailbot_render.models import Button, EmailRecord, RenderResult

log = logging.getLogger(__name__)

PREVIEW_LIMIT = 4096
NO_CONTENT_TEXT = "No content"
DELETE_TOKEN = "delete"

MODE_PREFIXES = {
    "l": "list",
    "p": "preview",
    "s": "summary",
    "d": "debug",
}

AddressChecker = Callable[[List[Optional[str]], RenderConfig], Awaitable[Any]]


def parse_callback(data: str) -> Tuple[str, Optional[str]]:
    """Split a callback token into ``(mode, email_id)``."""
    if data == DELETE_TOKEN:
        return DELETE_TOKEN, None
    prefix, sep, email_id = (data or "").partition(":")
    if not sep or prefix not in MODE_PREFIXES or not email_id:
        raise ValueError(f"Unknown callback data: {data!r}")
    return MODE_PREFIXES[prefix], email_id


def email_url(config: RenderConfig, mail: EmailRecord, mode: str) -> str:
    return f"https://{config.domain}/email/{mail.id}?mode={mode}"


@dataclass(frozen=True)
class ButtonRule:
    predicate: Callable[[EmailRecord, RenderConfig], bool]
    build: Callable[[EmailRecord, RenderConfig], Button]


# Optional list-view buttons, appended after "Preview" in this order.
LIST_BUTTON_RULES: List[ButtonRule] = [
    ButtonRule(
        lambda mail, config: config.can_summarize,
        lambda mail, config: Button("Summary", callback_data=f"s:{mail.id}"),
    ),
    ButtonRule(
        lambda mail, config: bool(mail.text),
        lambda mail, config: Button("Text", url=email_url(config, mail, "text")),
    ),
    ButtonRule(
        lambda mail, config: bool(mail.html),
        lambda mail, config: Button("HTML", url=email_url(config, mail, "html")),
    ),
    ButtonRule(
        lambda mail, config: config.debug_enabled,
        lambda mail, config: Button("Debug", callback_data=f"d:{mail.id}"),
    ),
]


def render_detail(text: Optional[str], email_id: str) -> RenderResult:
    """Body with the shared Back/Delete footer."""
    footer = [
        Button("Back", callback_data=f"l:{email_id}"),
        # Static token, the same for every email.
        Button("Delete", callback_data=DELETE_TOKEN),
    ]
    return RenderResult(text=text or NO_CONTENT_TEXT, keyboard=[footer])


class EmailRenderer:
    """Builds the bot message for an email in each display mode."""

    def __init__(self, config: RenderConfig, address_checker: Optional[AddressChecker] = None) -> None:
        self.config = config
        self.address_checker = address_checker

    async def render(self, mode: str, mail: EmailRecord) -> RenderResult:
        """Render by mode name (``"summary"``) or callback prefix (``"s"``)."""
        name = MODE_PREFIXES.get(mode, mode)
        handlers: Dict[str, Callable[[EmailRecord], Awaitable[RenderResult]]] = {
            "list": self.render_list,
            "preview": self.render_preview,
            "summary": self.render_summary,
            "debug": self.render_debug,
        }
        if name not in handlers:
            raise ValueError(f"Unknown render mode: {mode!r}")
        return await handlers[name](mail)

    async def render_list(self, mail: EmailRecord) -> RenderResult:
        text = f"{mail.subject}\n\n-----------\nFrom\t:\t{mail.sender}\nTo\t\t:\t{mail.recipient}"
        row = [Button("Preview", callback_data=f"p:{mail.id}")]
        row.extend(rule.build(mail, self.config) for rule in LIST_BUTTON_RULES if rule.predicate(mail, self.config))
        return RenderResult(text=text, keyboard=[row])

    async def render_preview(self, mail: EmailRecord) -> RenderResult:
        return render_detail((mail.text or "")[:PREVIEW_LIMIT], mail.id)

    async def render_summary(self, mail: EmailRecord) -> RenderResult:
        result = await summarize_email(mail, self.config)
        return render_detail(format_summary(result), mail.id)

    async def render_debug(self, mail: EmailRecord) -> RenderResult:
        if self.address_checker is None:
            raise RuntimeError("Debug view needs an address checker")
        data = mail.to_dict()
        block = await self.address_checker([data.get("from"), data.get("to")], self.config)
        log.info("Debug view for email %s", mail.id)

        data.pop("text", None)
        data.pop("html", None)
        data["block"] = block
        return render_detail(json.dumps(data, indent=2, ensure_ascii=False), mail.id)


__all__ = [
    "AddressChecker",
    "DELETE_TOKEN",
    "EmailRenderer",
    "LIST_BUTTON_RULES",
    "MODE_PREFIXES",
    "NO_CONTENT_TEXT",
    "PREVIEW_LIMIT",
    "parse_callback",
    "render_detail",
]
