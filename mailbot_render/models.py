from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

KNOWN_FIELDS = ("id", "subject", "from", "to", "text", "html")


@dataclass(frozen=True)
class EmailRecord:
    """Cached email as stored by the bot. Never mutated by the renderer."""

    id: str
    subject: str = ""
    sender: str = ""
    recipient: str = ""
    text: Optional[str] = None
    html: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    # Cache mapping as loaded, values untouched.
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EmailRecord":
        if not isinstance(raw, Mapping):
            raise ValueError(f"Email record must be a mapping, got {type(raw).__name__}")
        if "id" not in raw:
            raise ValueError("Email record without id")
        return cls(
            id=str(raw["id"]),
            subject=raw.get("subject") or "",
            sender=raw.get("from") or "",
            recipient=raw.get("to") or "",
            text=raw.get("text"),
            html=raw.get("html"),
            extra={key: value for key, value in raw.items() if key not in KNOWN_FIELDS},
            raw=dict(raw),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.raw is not None:
            return dict(self.raw)
        data: Dict[str, Any] = {
            "id": self.id,
            "subject": self.subject,
            "from": self.sender,
            "to": self.recipient,
            "text": self.text,
            "html": self.html,
        }
        data.update(self.extra)
        return data


@dataclass(frozen=True)
class Button:
    label: str
    callback_data: Optional[str] = None
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.callback_data is None) == (self.url is None):
            raise ValueError(f"Button {self.label!r} needs exactly one of callback_data or url")

    def to_telegram(self) -> Dict[str, str]:
        if self.url is not None:
            return {"text": self.label, "url": self.url}
        return {"text": self.label, "callback_data": self.callback_data}


@dataclass
class RenderResult:
    text: str
    keyboard: List[List[Button]]
    link_preview_disabled: bool = field(default=True, init=False)

    def to_telegram(self) -> Dict[str, Any]:
        """Parameters for ``sendMessage``/``editMessageText``."""
        return {
            "text": self.text,
            "reply_markup": {
                "inline_keyboard": [[button.to_telegram() for button in row] for row in self.keyboard],
            },
            "link_preview_options": {"is_disabled": self.link_preview_disabled},
        }


__all__ = ["Button", "EmailRecord", "RenderResult"]
